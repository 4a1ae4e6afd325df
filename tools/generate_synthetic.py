#!/usr/bin/env python3
"""Generate a synthetic college placement dataset for demos.

Usage:
    python tools/generate_synthetic.py --output data/CollegePlacement.csv --students 2000 --colleges 40 --seed 42

Rows use the CollegePlacement.csv headers. Placement odds rise with CGPA,
IQ, communication and internship experience, and each college gets its own
offset so the ranking view has something to separate.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd

COLUMNS = [
    "College_ID",
    "IQ",
    "Prev_Sem_Result",
    "CGPA",
    "Academic_Performance",
    "Internship_Experience",
    "Extra_Curricular_Score",
    "Communication_Skills",
    "Projects_Completed",
    "Placement",
]


def _yes_no(mask: np.ndarray) -> np.ndarray:
    return np.where(mask, "Yes", "No")


def generate_synthetic_dataset(
    output_path: Path | None = None,
    n_students: int = 2000,
    n_colleges: int = 40,
    seed: int = 42,
) -> pd.DataFrame:
    if n_students < 1 or n_colleges < 1:
        raise ValueError("Need at least one student and one college")
    rng = np.random.default_rng(seed)

    colleges = np.array([f"CLG{i:04d}" for i in range(1, n_colleges + 1)])
    college_effect = rng.normal(0.0, 0.6, size=n_colleges)
    college_idx = rng.integers(0, n_colleges, size=n_students)

    iq = np.clip(np.round(rng.normal(100, 15, size=n_students)), 41, 158).astype(int)
    prev_sem = np.clip(rng.normal(7.5, 1.0, size=n_students), 5.0, 10.0)
    # CGPA tracks the previous semester closely.
    cgpa = np.clip(prev_sem + rng.normal(0.0, 0.3, size=n_students), 4.5, 10.5)
    academic = rng.integers(1, 11, size=n_students)
    internship = rng.random(n_students) < 0.4
    extra = rng.integers(0, 11, size=n_students)
    communication = rng.integers(1, 11, size=n_students)
    projects = rng.integers(0, 6, size=n_students)

    logit = (
        -9.0
        + 0.75 * cgpa
        + 0.025 * (iq - 100)
        + 0.2 * communication
        + 0.6 * internship
        + 0.1 * projects
        + college_effect[college_idx]
    )
    placed = rng.random(n_students) < 1.0 / (1.0 + np.exp(-logit))

    result = pd.DataFrame(
        {
            "College_ID": colleges[college_idx],
            "IQ": iq,
            "Prev_Sem_Result": np.round(prev_sem, 2),
            "CGPA": np.round(cgpa, 2),
            "Academic_Performance": academic,
            "Internship_Experience": _yes_no(internship),
            "Extra_Curricular_Score": extra,
            "Communication_Skills": communication,
            "Projects_Completed": projects,
            "Placement": _yes_no(placed),
        },
        columns=COLUMNS,
    )

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result.to_csv(output_path, index=False)
    return result


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic college placement dataset for demos")
    parser.add_argument("--output", type=Path, default=Path("data/CollegePlacement.csv"), help="Where to write synthetic CSV")
    parser.add_argument("--students", type=int, default=2000, help="Number of synthetic students")
    parser.add_argument("--colleges", type=int, default=40, help="Number of distinct colleges")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args(list(argv) if argv is not None else None)

    generate_synthetic_dataset(args.output, n_students=args.students, n_colleges=args.colleges, seed=args.seed)
    print(f"Synthetic dataset written to {args.output}")


if __name__ == "__main__":
    main()
