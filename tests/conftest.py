import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from hfmort.datasets import recode_factors, select_features


def _make_records(n: int, seed: int) -> pd.DataFrame:
    """Synthetic records with the heart-failure schema and a real signal."""
    rng = np.random.RandomState(seed)
    df = pd.DataFrame(
        {
            "age": rng.uniform(40, 95, n).round(0),
            "anaemia": rng.randint(0, 2, n),
            "creatinine_phosphokinase": rng.randint(23, 7861, n),
            "diabetes": rng.randint(0, 2, n),
            "ejection_fraction": rng.randint(14, 80, n),
            "high_blood_pressure": rng.randint(0, 2, n),
            "platelets": rng.uniform(25000, 850000, n).round(0),
            "serum_creatinine": rng.uniform(0.5, 6.0, n).round(1),
            "serum_sodium": rng.randint(113, 148, n),
            "sex": rng.randint(0, 2, n),
            "smoking": rng.randint(0, 2, n),
            "time": rng.randint(4, 285, n),
        }
    )
    logit = (
        -1.0
        - 0.015 * (df["time"] - 130)
        + 0.6 * (df["serum_creatinine"] - 1.4)
        - 0.05 * (df["ejection_fraction"] - 38)
        + 0.04 * (df["age"] - 60)
    )
    prob = 1 / (1 + np.exp(-logit))
    df["DEATH_EVENT"] = (rng.uniform(0, 1, n) < prob).astype(int)
    return df


@pytest.fixture
def raw_records():
    """200 synthetic patient records, roughly a third with the event."""
    return _make_records(200, seed=42)


@pytest.fixture
def records(raw_records):
    return recode_factors(raw_records)


@pytest.fixture
def selected(records):
    return select_features(records)


@pytest.fixture
def records_csv(raw_records, tmp_path):
    path = tmp_path / "heart_failure_clinical_records_dataset.csv"
    raw_records.to_csv(path, index=False)
    return path
