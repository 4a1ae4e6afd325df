from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from .mapping import CANONICAL_COLUMNS, NUMERIC_FIELDS

STORE_COLUMNS = ["record_id", "sample_key"] + CANONICAL_COLUMNS


@dataclass(frozen=True)
class StudentRecord:
    """One student row. Numeric fields hold NaN when their column was not resolved."""

    record_id: int
    sample_key: float
    college_id: str
    iq: float
    prev_sem: float
    cgpa: float
    academic_perf: float
    internship: str
    extra_curricular: float
    communication: float
    projects: float
    placement: str

    @property
    def placed(self) -> bool:
        return self.placement == "Yes"

    @property
    def has_internship(self) -> bool:
        return self.internship == "Yes"

    def is_resolved(self, name: str) -> bool:
        value = getattr(self, name)
        if name in NUMERIC_FIELDS:
            return not math.isnan(value)
        return value != ""


@dataclass(frozen=True)
class RecordStore:
    """The loaded dataset plus a stable record id and a fixed random sampling key.

    Built once per load and never mutated. Derivations filter ``frame``
    directly; ``to_frame`` returns a copy for callers that modify rows.
    """

    frame: pd.DataFrame
    missing_fields: List[str] = field(default_factory=list)
    source: Optional[str] = None

    @classmethod
    def from_canonical(
        cls,
        canonical: pd.DataFrame,
        seed: Optional[int] = None,
        missing_fields: Optional[Sequence[str]] = None,
        source: Optional[str] = None,
    ) -> "RecordStore":
        rng = np.random.default_rng(seed)
        data = canonical.reset_index(drop=True).copy()
        data.insert(0, "record_id", np.arange(len(data), dtype=int))
        data.insert(1, "sample_key", rng.random(len(data)))
        return cls(frame=data[STORE_COLUMNS], missing_fields=list(missing_fields or []), source=source)

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def total(self) -> int:
        return len(self.frame)

    def to_frame(self) -> pd.DataFrame:
        return self.frame.copy()

    def records(self) -> Iterator[StudentRecord]:
        for row in self.frame.itertuples(index=False):
            yield _to_record(row)

    def record(self, record_id: int) -> StudentRecord:
        match = self.frame[self.frame["record_id"] == record_id]
        if match.empty:
            raise KeyError(f"No record with id {record_id}")
        return _to_record(next(match.itertuples(index=False)))

    def colleges(self) -> List[str]:
        values = self.frame["college_id"]
        return sorted(values[values != ""].unique().tolist())


def _to_record(row) -> StudentRecord:
    return StudentRecord(
        record_id=int(row.record_id),
        sample_key=float(row.sample_key),
        college_id=str(row.college_id),
        iq=float(row.iq),
        prev_sem=float(row.prev_sem),
        cgpa=float(row.cgpa),
        academic_perf=float(row.academic_perf),
        internship=str(row.internship),
        extra_curricular=float(row.extra_curricular),
        communication=float(row.communication),
        projects=float(row.projects),
        placement=str(row.placement),
    )
