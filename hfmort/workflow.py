import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from hfmort.datasets import build_xy
from hfmort.evaluate import compute_metrics, confusion_table, format_metrics, roc_curve_frame
from hfmort.importance import variable_importance
from hfmort.models import make_model
from hfmort.preprocessing import Recipe

logger = logging.getLogger(__name__)


@dataclass
class LastFit:
    workflow: "Workflow"
    predictions: pd.DataFrame
    metrics: dict[str, float]
    confusion: pd.DataFrame
    roc: pd.DataFrame
    importance: pd.DataFrame


class Workflow:
    """A preprocessing recipe bundled with a model and its parameters.

    Fitting always prepares a fresh copy of the recipe, so one workflow can
    be fitted on many resamples without sharing fitted state.
    """

    def __init__(self, recipe: Recipe, model_name: str, params: dict | None = None):
        self.recipe = recipe
        self.model_name = model_name
        self.params = dict(params or {})
        self.is_fitted = False

    def with_params(self, **params) -> "Workflow":
        return Workflow(self.recipe, self.model_name, {**self.params, **params})

    def fit(self, train: pd.DataFrame) -> "Workflow":
        self.recipe_ = self.recipe.clone().prep(train)
        X, y = build_xy(self.recipe_.juice(), self.recipe.outcome)
        self.model_ = make_model(self.model_name, **self.params).fit(X, y)
        self.is_fitted = True
        return self

    def _check_fitted(self):
        if not self.is_fitted:
            raise RuntimeError(f"Workflow {self.model_name} is not fitted, call fit() first.")

    def baked_predictors(self, df: pd.DataFrame) -> pd.DataFrame:
        self._check_fitted()
        return self.recipe_.bake(df)[self.recipe_.feature_names]

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        """Probability of the event (death) for every row."""
        return self.model_.predict_proba(self.baked_predictors(df))[:, 1]

    def predict(self, df: pd.DataFrame, threshold: float = 0.5) -> np.ndarray:
        return (self.predict_proba(df) >= threshold).astype(int)

    def last_fit(
        self,
        train: pd.DataFrame,
        test: pd.DataFrame,
        threshold: float = 0.5,
        random_state: int = 42,
    ) -> LastFit:
        """Fit on the full training split and evaluate once on the test split."""
        self.fit(train)
        y_true = test[self.recipe.outcome].astype(int)
        y_prob = self.predict_proba(test)
        y_pred = (y_prob >= threshold).astype(int)
        predictions = pd.DataFrame(
            {"truth": y_true.values, "prob": y_prob, "pred": y_pred}, index=test.index
        )
        baked = self.recipe_.bake(test)
        X_test, y_test = build_xy(baked, self.recipe.outcome)
        importance = variable_importance(
            self.model_, X_test, y_test, random_state=random_state
        )
        metrics = compute_metrics(y_true, y_prob, threshold)
        logger.info(f"{self.model_name}: test {format_metrics(metrics)}")
        return LastFit(
            workflow=self,
            predictions=predictions,
            metrics=metrics,
            confusion=confusion_table(y_true, y_pred),
            roc=roc_curve_frame(y_true, y_prob),
            importance=importance,
        )

    def __repr__(self):
        return f"Workflow({self.recipe!r}, model={self.model_name!r}, params={self.params})"
