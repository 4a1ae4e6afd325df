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

SAMPLE_ROWS = [
    ("CLG0001", 107, 6.61, 6.28, 8, "No", 8, 8, 4, "No"),
    ("CLG0001", 97, 5.52, 5.37, 8, "No", 7, 8, 0, "No"),
    ("CLG0001", 109, 5.36, 5.83, 9, "No", 3, 1, 1, "No"),
    ("CLG0002", 122, 5.47, 5.75, 6, "Yes", 1, 6, 1, "No"),
    ("CLG0002", 96, 7.91, 7.69, 7, "No", 8, 10, 2, "No"),
    ("CLG0002", 115, 8.44, 8.42, 9, "Yes", 2, 9, 5, "Yes"),
    ("CLG0003", 101, 7.10, 7.24, 6, "Yes", 5, 7, 3, "Yes"),
    ("CLG0003", 88, 6.02, 6.15, 4, "No", 4, 5, 2, "No"),
    ("CLG0003", 130, 9.21, 9.35, 10, "Yes", 9, 9, 5, "Yes"),
    ("CLG0004", 112, 8.80, 8.67, 8, "Yes", 6, 7, 4, "Yes"),
    ("CLG0004", 104, 7.45, 7.52, 7, "No", 7, 6, 3, "Yes"),
    ("CLG0001", 118, 9.90, 9.85, 9, "Yes", 8, 8, 5, "Yes"),
]


def load_sample_dataframe() -> pd.DataFrame:
    """Twelve students across four colleges, six of them placed."""
    return pd.DataFrame(SAMPLE_ROWS, columns=COLUMNS)
