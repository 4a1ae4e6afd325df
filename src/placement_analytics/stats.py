"""Order statistics and kernel density helpers.

Every function drops NaN sentinels before computing and returns 0.0 (or an
empty result) for empty input instead of raising.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Tuple

import numpy as np

from .config import KDE_BANDWIDTH, KDE_DOMAIN, KDE_RESOLUTION


def _clean(values: Iterable[float]) -> np.ndarray:
    arr = np.asarray(list(values), dtype=float)
    return arr[~np.isnan(arr)]


def quantile(values: Iterable[float], p: float) -> float:
    """Continuous quantile with linear interpolation between order statistics (R-7)."""
    arr = np.sort(_clean(values))
    if arr.size == 0:
        return 0.0
    if p <= 0:
        return float(arr[0])
    if p >= 1:
        return float(arr[-1])
    h = (arr.size - 1) * p
    lower = int(np.floor(h))
    frac = h - lower
    upper = min(lower + 1, arr.size - 1)
    return float(arr[lower] + (arr[upper] - arr[lower]) * frac)


def mean(values: Iterable[float]) -> float:
    arr = _clean(values)
    return float(arr.mean()) if arr.size else 0.0


def summarize(values: Iterable[float]) -> Dict[str, float]:
    arr = _clean(values)
    if arr.size == 0:
        return {"count": 0, "min": 0.0, "q1": 0.0, "median": 0.0, "q3": 0.0, "max": 0.0, "mean": 0.0}
    return {
        "count": int(arr.size),
        "min": float(arr.min()),
        "q1": quantile(arr, 0.25),
        "median": quantile(arr, 0.5),
        "q3": quantile(arr, 0.75),
        "max": float(arr.max()),
        "mean": float(arr.mean()),
    }


def epanechnikov(bandwidth: float = KDE_BANDWIDTH) -> Callable[[np.ndarray], np.ndarray]:
    if bandwidth <= 0:
        raise ValueError("bandwidth must be positive")

    def kernel(v: np.ndarray) -> np.ndarray:
        u = np.asarray(v, dtype=float) / bandwidth
        return np.where(np.abs(u) <= 1, 0.75 * (1 - u * u) / bandwidth, 0.0)

    return kernel


def kde_sample_points(domain: Tuple[float, float] = KDE_DOMAIN, resolution: int = KDE_RESOLUTION) -> np.ndarray:
    """``resolution`` evenly spaced points from the domain start, end excluded."""
    lo, hi = domain
    step = (hi - lo) / resolution
    return lo + np.arange(resolution) * step


def kernel_density(
    values: Iterable[float],
    points: np.ndarray | None = None,
    bandwidth: float = KDE_BANDWIDTH,
) -> np.ndarray:
    """Mean Epanechnikov kernel of (point - value) at each sample point."""
    if points is None:
        points = kde_sample_points()
    arr = _clean(values)
    if arr.size == 0:
        return np.zeros(len(points), dtype=float)
    kernel = epanechnikov(bandwidth)
    diffs = np.asarray(points, dtype=float)[:, None] - arr[None, :]
    return kernel(diffs).mean(axis=1)


def top_percent(sorted_reference: np.ndarray, value: float) -> float:
    """Return the "top X%" position of ``value`` within an ascending reference.

    NaN when the reference is empty or the value is a sentinel.
    """
    if sorted_reference.size == 0 or np.isnan(value):
        return float("nan")
    at_or_below = np.searchsorted(sorted_reference, value, side="right")
    return float(100 - np.floor(at_or_below / sorted_reference.size * 100 + 0.5))
