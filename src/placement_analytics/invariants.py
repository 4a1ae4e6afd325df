from typing import Dict, List

import pandas as pd

from .config import CGPA_DOMAIN
from .mapping import CANONICAL_COLUMNS, NUMERIC_FIELDS
from .records import RecordStore

YES_NO_FIELDS = ["internship", "placement"]


def check_resolved_fields(store: RecordStore) -> Dict[str, bool]:
    missing = set(store.missing_fields)
    return {col: col not in missing for col in CANONICAL_COLUMNS}


def check_unique_ids(df: pd.DataFrame) -> int:
    return int(df["record_id"].duplicated().sum())


def check_sample_keys(df: pd.DataFrame) -> int:
    keys = df["sample_key"]
    return int(((keys < 0) | (keys >= 1) | keys.isna()).sum())


def check_numeric_sentinels(df: pd.DataFrame) -> Dict[str, int]:
    return {col: int(df[col].isna().sum()) for col in NUMERIC_FIELDS}


def check_cgpa_domain(df: pd.DataFrame) -> int:
    lo, hi = CGPA_DOMAIN
    cgpa = df["cgpa"].dropna()
    return int(((cgpa < lo) | (cgpa >= hi)).sum())


def check_yes_no(df: pd.DataFrame) -> Dict[str, int]:
    return {col: int((~df[col].isin(["Yes", "No"])).sum()) for col in YES_NO_FIELDS}


def run_invariants(store: RecordStore) -> List[Dict[str, object]]:
    df = store.frame
    results = []

    resolved = check_resolved_fields(store)
    unresolved = [col for col, ok in resolved.items() if not ok]
    results.append(
        {
            "name": "resolved_fields",
            "ok": len(unresolved) == 0,
            "detail": ", ".join(unresolved) if unresolved else "all resolved",
        }
    )

    duplicates = check_unique_ids(df)
    results.append({"name": "unique_record_ids", "ok": duplicates == 0, "detail": duplicates})

    bad_keys = check_sample_keys(df)
    results.append({"name": "sample_keys_in_unit_interval", "ok": bad_keys == 0, "detail": bad_keys})

    sentinels = {col: n for col, n in check_numeric_sentinels(df).items() if n}
    results.append({"name": "numeric_sentinels", "ok": not sentinels, "detail": sentinels or 0})

    outside = check_cgpa_domain(df)
    results.append({"name": "cgpa_outside_bins", "ok": outside == 0, "detail": outside})

    odd = {col: n for col, n in check_yes_no(df).items() if n}
    results.append({"name": "yes_no_values", "ok": not odd, "detail": odd or 0})

    return results
