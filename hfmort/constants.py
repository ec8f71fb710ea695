import os
import pathlib
from pathlib import Path
from typing import TypeAlias

import matplotlib.figure

TYPE_MATPLOTLIB_FIGURES: TypeAlias = matplotlib.figure.Figure
TYPE_FILEPATHS: TypeAlias = str | pathlib.Path
DEFAULT_COLORMAP: str = "viridis"
DEFAULT_FONTSIZE_SMALL: float = 12
DEFAULT_FIGURE_SIZE: tuple[float, float] = (10.0, 6.0)

PATH_DATA = Path(os.environ.get("HFMORT_PATH_DATA", "data")).absolute()
DATASET_FILENAME = "heart_failure_clinical_records_dataset.csv"

OUTCOME_RAW = "DEATH_EVENT"
OUTCOME = "death"
EVENT_LEVEL = 1

RAW_COLUMNS = [
    "age",
    "anaemia",
    "creatinine_phosphokinase",
    "diabetes",
    "ejection_fraction",
    "high_blood_pressure",
    "platelets",
    "serum_creatinine",
    "serum_sodium",
    "sex",
    "smoking",
    "time",
    OUTCOME_RAW,
]

FACTOR_COLUMNS = ["anaemia", "diabetes", "high_blood_pressure", "sex", "smoking"]

SELECTED_FEATURES = ["time", "serum_creatinine", "ejection_fraction", "age"]

SEED = 42
