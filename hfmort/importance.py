import logging

import pandas as pd
from sklearn.inspection import permutation_importance
from sklearn.metrics import roc_auc_score

logger = logging.getLogger(__name__)


class _ProbaScorer:
    """Adapter so permutation_importance can score any predict_proba model."""

    def __init__(self, model):
        self.model = model

    def fit(self, X, y):
        return self

    def predict_proba(self, X):
        return self.model.predict_proba(X)


def variable_importance(
    model, X: pd.DataFrame, y, n_repeats: int = 10, random_state: int = 42
) -> pd.DataFrame:
    """Importance per predictor, sorted descending.

    Uses the model's own importance when it has one, otherwise permutation
    importance measured as the drop in ROC-AUC.
    """
    if hasattr(model, "importance"):
        scores = model.importance()
        method = "native"
    else:
        result = permutation_importance(
            _ProbaScorer(model),
            X,
            y,
            scoring=_roc_auc_scorer,
            n_repeats=n_repeats,
            random_state=random_state,
        )
        scores = pd.Series(result.importances_mean, index=list(X.columns))
        method = "permutation"
    logger.debug(f"Computed {method} importance for {type(model).__name__}")
    return (
        pd.DataFrame({"variable": scores.index, "importance": scores.values})
        .sort_values("importance", ascending=False, kind="stable")
        .reset_index(drop=True)
        .assign(method=method)
    )


def _roc_auc_scorer(estimator, X, y):
    return roc_auc_score(y, estimator.predict_proba(X)[:, 1])
