import logging

import pandas as pd

from hfmort.constants import (
    FACTOR_COLUMNS,
    OUTCOME,
    OUTCOME_RAW,
    RAW_COLUMNS,
    SELECTED_FEATURES,
)

logger = logging.getLogger(__name__)


def load_records(path, required_columns: list[str] | None = None) -> pd.DataFrame:
    """Read the patient records CSV, one row per patient."""
    df = pd.read_csv(path)
    logger.info(f"Loaded {len(df)} records with {df.shape[1]} columns from {path}")
    if required_columns is None:
        required_columns = RAW_COLUMNS
    validate_columns(df, required_columns)
    return df


def validate_columns(df: pd.DataFrame, required: list[str]) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns: {missing}. Found columns: {list(df.columns)}"
        )


def recode_factors(
    df: pd.DataFrame,
    factor_columns: list[str] | None = None,
    outcome_raw: str = OUTCOME_RAW,
    outcome: str = OUTCOME,
) -> pd.DataFrame:
    """Convert binary indicators to categories and replace the raw outcome.

    The cleaned outcome keeps the categories ``[0, 1]`` even when one of them
    is absent so downstream encoders see a stable level set.
    """
    if factor_columns is None:
        factor_columns = FACTOR_COLUMNS
    validate_columns(df, [*factor_columns, outcome_raw])
    df = df.copy()
    for c in factor_columns:
        df[c] = df[c].astype("category")
    df[outcome] = pd.Categorical(df[outcome_raw].astype(int), categories=[0, 1])
    return df.drop(columns=[outcome_raw])


def select_features(
    df: pd.DataFrame,
    features: list[str] | None = None,
    outcome: str = OUTCOME,
) -> pd.DataFrame:
    if features is None:
        features = SELECTED_FEATURES
    validate_columns(df, [*features, outcome])
    return df[[*features, outcome]].copy()
