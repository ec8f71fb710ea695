"""Preprocessing recipe fitted on training data and re-applied to new data.

Steps run in a fixed order:
  1. Down-sample the majority outcome class (training data only)
  2. One-hot encode nominal predictors, dropping the first level
  3. Drop numeric columns with zero variance
  4. Normalize numeric columns to zero mean and unit variance

Statistics for steps 2-4 are estimated after down-sampling, so the prepared
training table is exactly balanced and exactly standardized.
"""

import logging

import numpy as np
import pandas as pd
from imblearn.under_sampling import RandomUnderSampler
from sklearn.feature_selection import VarianceThreshold
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from hfmort.constants import OUTCOME, SEED

logger = logging.getLogger(__name__)


class Recipe:
    def __init__(
        self,
        outcome: str = OUTCOME,
        downsample: bool = True,
        dummy: bool = True,
        zero_variance: bool = True,
        normalize: bool = True,
        under_ratio: float = 1.0,
        seed: int = SEED,
    ):
        self.outcome = outcome
        self.downsample = downsample
        self.dummy = dummy
        self.zero_variance = zero_variance
        self.normalize = normalize
        self.under_ratio = under_ratio
        self.seed = seed
        self.is_prepped = False

    def get_params(self) -> dict:
        return {
            "outcome": self.outcome,
            "downsample": self.downsample,
            "dummy": self.dummy,
            "zero_variance": self.zero_variance,
            "normalize": self.normalize,
            "under_ratio": self.under_ratio,
            "seed": self.seed,
        }

    def clone(self, **overrides) -> "Recipe":
        """Unfitted copy with the same step configuration."""
        return Recipe(**{**self.get_params(), **overrides})

    def prep(self, train: pd.DataFrame) -> "Recipe":
        if self.outcome not in train.columns:
            raise ValueError(f"Outcome {self.outcome} not found in {list(train.columns)}")
        y = train[self.outcome]
        if y.nunique() < 2:
            raise ValueError(
                f"Outcome {self.outcome} needs two classes to prepare the recipe, "
                f"found {y.unique().tolist()}"
            )

        if self.downsample:
            sampler = RandomUnderSampler(
                sampling_strategy=self.under_ratio, random_state=self.seed
            )
            sampler.fit_resample(np.arange(len(train)).reshape(-1, 1), y.astype(int))
            train = train.iloc[np.sort(sampler.sample_indices_)]
            logger.debug(
                f"Down-sampled training rows to {len(train)}: "
                f"{train[self.outcome].value_counts().to_dict()}"
            )

        X = train.drop(columns=[self.outcome])
        self.predictors_ = list(X.columns)
        self.nominal_ = [
            c
            for c in X.columns
            if isinstance(X[c].dtype, pd.CategoricalDtype) or X[c].dtype == "object"
        ]

        self.encoder_ = None
        if self.dummy and self.nominal_:
            self.encoder_ = OneHotEncoder(
                drop="first", handle_unknown="ignore", sparse_output=False
            )
            self.encoder_.fit(X[self.nominal_].astype(str))
        X = self._encode(X)

        self.numeric_ = list(X.columns)
        self.removed_ = []
        if self.zero_variance and self.numeric_:
            if not (X.var(ddof=0) > 0).any():
                raise ValueError(
                    f"Every predictor has zero variance in the training data: {self.numeric_}"
                )
            selector = VarianceThreshold(threshold=0.0).fit(X)
            keep = set(X.columns[selector.get_support()])
            self.removed_ = [c for c in self.numeric_ if c not in keep]
            self.numeric_ = [c for c in self.numeric_ if c in keep]
        X = X[self.numeric_]

        self.scaler_ = None
        if self.normalize and self.numeric_:
            self.scaler_ = StandardScaler().fit(X)

        self.is_prepped = True
        self._train_processed = self._finish(X, train[self.outcome])
        logger.debug(f"Prepared recipe with predictors {self.numeric_}")
        return self

    def juice(self) -> pd.DataFrame:
        """Prepared training table, including the outcome column."""
        self._check_prepped()
        return self._train_processed.copy()

    def bake(self, df: pd.DataFrame) -> pd.DataFrame:
        """Apply fitted transformations to new data. Never down-samples."""
        self._check_prepped()
        missing = [c for c in self.predictors_ if c not in df.columns]
        if missing:
            raise ValueError(f"Missing predictors for bake: {missing}")
        X = self._encode(df[self.predictors_])[self.numeric_]
        outcome = df[self.outcome] if self.outcome in df.columns else None
        return self._finish(X, outcome)

    def summary(self) -> pd.DataFrame:
        rows = [
            {"step": "downsample", "enabled": self.downsample, "columns": [self.outcome]},
            {"step": "dummy", "enabled": self.dummy, "columns": getattr(self, "nominal_", None)},
            {"step": "zv", "enabled": self.zero_variance, "columns": getattr(self, "removed_", None)},
            {"step": "normalize", "enabled": self.normalize, "columns": getattr(self, "numeric_", None)},
        ]
        return pd.DataFrame(rows)

    @property
    def feature_names(self) -> list[str]:
        self._check_prepped()
        return list(self.numeric_)

    def _encode(self, X: pd.DataFrame) -> pd.DataFrame:
        if self.encoder_ is None:
            return X.astype("float64")
        dummies = pd.DataFrame(
            self.encoder_.transform(X[self.nominal_].astype(str)),
            columns=self.encoder_.get_feature_names_out(self.nominal_),
            index=X.index,
        )
        numeric = X.drop(columns=self.nominal_).astype("float64")
        return pd.concat([numeric, dummies], axis=1)

    def _finish(self, X: pd.DataFrame, outcome: pd.Series | None) -> pd.DataFrame:
        if self.scaler_ is not None:
            X = pd.DataFrame(self.scaler_.transform(X), columns=self.numeric_, index=X.index)
        if outcome is not None:
            X = X.assign(**{self.outcome: outcome.values})
        return X

    def _check_prepped(self):
        if not self.is_prepped:
            raise RuntimeError("Recipe has not been prepared, call prep() first.")

    def __repr__(self):
        steps = [
            name
            for name, enabled in [
                ("downsample", self.downsample),
                ("dummy", self.dummy),
                ("zv", self.zero_variance),
                ("normalize", self.normalize),
            ]
            if enabled
        ]
        return f"Recipe(outcome={self.outcome!r}, steps={steps})"
