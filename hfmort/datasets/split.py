import pandas as pd
from sklearn.model_selection import train_test_split


def split_dataset(
    df: pd.DataFrame,
    train_size: float | None = 0.75,
    test_size: float | None = None,
    shuffle: bool = True,
    random_state: int = 42,
    stratify_column: str | None = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    if test_size is None and train_size is not None:
        test_size = 1.0 - train_size
    elif train_size is None and test_size is not None:
        train_size = 1.0 - test_size
    if train_size is None or test_size is None:
        raise ValueError(f"Only one of {train_size=} or {test_size=} can be None!")
    train_size, test_size = round(train_size, 6), round(test_size, 6)
    if round(train_size + test_size, 6) != 1:
        raise ValueError(f"{train_size=} + {test_size=} != {train_size + test_size}")

    stratify = None
    if stratify_column is not None:
        stratify = df[stratify_column]
    train, test = train_test_split(
        df,
        train_size=train_size,
        test_size=test_size,
        random_state=random_state,
        stratify=stratify,
        shuffle=shuffle,
    )
    return train, test


def build_xy(df: pd.DataFrame, target: str) -> tuple[pd.DataFrame, pd.Series]:
    """Separate predictors from the target, coding the target as 0/1 integers."""
    X = df.drop(columns=[target])
    y = df[target].astype(int)
    return X, y
