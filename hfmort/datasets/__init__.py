from .load import load_records, recode_factors, select_features, validate_columns
from .split import build_xy, split_dataset

__all__ = [
    "load_records",
    "validate_columns",
    "recode_factors",
    "select_features",
    "split_dataset",
    "build_xy",
]
