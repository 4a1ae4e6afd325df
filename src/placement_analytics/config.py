"""Runtime settings and fixed domain constants for the dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

CGPA_DOMAIN = (4.0, 11.0)
CGPA_STEP = 0.1
BIN_WIDTH = 0.5

DEFAULT_SAMPLE_PCT = 5
TOP_N_COLLEGES = 10

KDE_BANDWIDTH = 0.8
KDE_RESOLUTION = 50
KDE_DOMAIN = (0.0, 11.0)

# Scatter rendering hints
TRANSITION_POINT_LIMIT = 200
FAST_TRANSITION_POINT_LIMIT = 80
OPACITY_ONLY_MIN_PCT = 30

DEFAULT_DATA_PATH = Path("data") / "CollegePlacement.csv"


@dataclass(frozen=True)
class DashboardSettings:
    """Settings for one dashboard session.

    ``seed`` fixes the per-record sampling keys; None draws fresh keys for
    every load, which is what an interactive session wants.
    """

    data_path: Path = DEFAULT_DATA_PATH
    seed: Optional[int] = None
    search_debounce_ms: float = 200.0
    sample_debounce_ms: float = 100.0
    frame_ms: float = 16.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DashboardSettings":
        """Return defaults overridden by ``PLACEMENT_*`` environment variables."""
        env = os.environ if environ is None else environ
        settings = cls()

        path = env.get("PLACEMENT_DATA_PATH", "").strip()
        if path:
            settings = replace(settings, data_path=Path(path))

        seed = _parse_int(env.get("PLACEMENT_SEED"))
        if seed is not None:
            settings = replace(settings, seed=seed)

        search_ms = _parse_float(env.get("PLACEMENT_SEARCH_DEBOUNCE_MS"))
        if search_ms is not None and search_ms >= 0:
            settings = replace(settings, search_debounce_ms=search_ms)

        sample_ms = _parse_float(env.get("PLACEMENT_SAMPLE_DEBOUNCE_MS"))
        if sample_ms is not None and sample_ms >= 0:
            settings = replace(settings, sample_debounce_ms=sample_ms)

        return settings


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _parse_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.strip())
    except ValueError:
        return None
