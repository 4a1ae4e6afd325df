import logging
from typing import Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS = [
    "college_id",
    "iq",
    "prev_sem",
    "cgpa",
    "academic_perf",
    "internship",
    "extra_curricular",
    "communication",
    "projects",
    "placement",
]

NUMERIC_FIELDS = [
    "iq",
    "prev_sem",
    "cgpa",
    "academic_perf",
    "extra_curricular",
    "communication",
    "projects",
]

CATEGORICAL_FIELDS = ["college_id", "internship", "placement"]

# Accepted header names per field, in lookup order.
FIELD_ALIASES: Dict[str, List[str]] = {
    "college_id": ["College_ID", "CollegeID", "CollegeId"],
    "iq": ["IQ", "Iq"],
    "prev_sem": ["Prev_Sem_Result", "PrevSemResult"],
    "cgpa": ["CGPA", "Cgpa"],
    "academic_perf": ["Academic_Performance", "AcademicPerformance"],
    "internship": ["Internship_Experience", "InternshipExperience"],
    "extra_curricular": ["Extra_Curricular_Score", "ExtraCurricularScore"],
    "communication": ["Communication_Skills", "CommunicationSkills"],
    "projects": ["Projects_Completed", "ProjectsCompleted"],
    "placement": ["Placement"],
}


def resolve_columns(df: pd.DataFrame) -> Dict[str, Optional[str]]:
    """Map each canonical field to the first accepted header present in ``df``."""

    resolved: Dict[str, Optional[str]] = {}
    for field, aliases in FIELD_ALIASES.items():
        resolved[field] = next((alias for alias in aliases if alias in df.columns), None)
    return resolved


def unresolved_fields(df: pd.DataFrame) -> List[str]:
    return [field for field, column in resolve_columns(df).items() if column is None]


def apply_aliases(df: pd.DataFrame) -> pd.DataFrame:
    """Return a canonical dataframe built from whichever aliases ``df`` uses.

    Fields with no matching header are kept as sentinels (NaN for numeric
    fields, "" for categorical ones) so every row still loads.
    """

    resolved = resolve_columns(df)
    missing = [field for field, column in resolved.items() if column is None]
    if missing:
        logger.warning("No matching column for fields %s; values set to sentinel", ", ".join(missing))

    normalized = pd.DataFrame(index=df.index)
    for field in CANONICAL_COLUMNS:
        column = resolved[field]
        if field in NUMERIC_FIELDS:
            if column is None:
                normalized[field] = float("nan")
            else:
                normalized[field] = pd.to_numeric(df[column], errors="coerce").astype(float)
        else:
            if column is None:
                normalized[field] = ""
            else:
                normalized[field] = df[column].fillna("").astype(str).str.strip()

    return normalized[CANONICAL_COLUMNS].reset_index(drop=True)
