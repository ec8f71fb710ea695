"""Model wrappers for the mortality classifiers.

All classes in this module use the sklearn fit/predict/predict_proba API and
take parsnip-style argument names so tuning grids read the same for every
engine. xgboost is imported lazily.
"""

import numpy as np
import pandas as pd
import statsmodels.api as sm


def _feature_names(X) -> list[str]:
    if isinstance(X, pd.DataFrame):
        return list(X.columns)
    return [f"f{i}" for i in range(np.shape(X)[1])]


def _design(X) -> np.ndarray:
    return sm.add_constant(np.asarray(X, dtype=float), has_constant="add")


class LogisticModel:
    """Unpenalized logistic regression, fitted as a binomial GLM.

    Standard errors and Wald statistics come straight from the statsmodels
    fit, as a GLM engine reports them.
    """

    def __init__(self, max_iter=100, **kwargs):
        self.max_iter = max_iter
        self.kwargs = kwargs

    def get_params(self) -> dict:
        return {"max_iter": self.max_iter, **self.kwargs}

    def fit(self, X, y, **kwargs):
        self.feature_names_ = _feature_names(X)
        self.result_ = sm.GLM(
            np.asarray(y).astype(int), _design(X), family=sm.families.Binomial()
        ).fit(maxiter=self.max_iter, **self.kwargs)
        return self

    def predict_proba(self, X):
        p = np.asarray(self.result_.predict(_design(X)))
        return np.column_stack([1 - p, p])

    def predict(self, X):
        return (self.predict_proba(X)[:, 1] >= 0.5).astype(int)

    def coefficients(self) -> pd.DataFrame:
        """Predictor terms without the intercept."""
        return pd.DataFrame(
            {
                "term": self.feature_names_,
                "estimate": np.asarray(self.result_.params)[1:],
                "std_error": np.asarray(self.result_.bse)[1:],
                "statistic": np.asarray(self.result_.tvalues)[1:],
            }
        )

    def importance(self) -> pd.Series:
        """Absolute Wald z statistic per predictor."""
        coefs = self.coefficients()
        return pd.Series(coefs["statistic"].abs().fillna(0.0).values, index=coefs["term"])


class BoostedTreesModel:
    """XGBClassifier addressed through tree-model argument names.

    ``mtry`` is the fraction of predictors sampled at every split.
    """

    def __init__(
        self,
        trees=1000,
        tree_depth=6,
        min_n=1,
        loss_reduction=0.0,
        sample_size=1.0,
        mtry=1.0,
        learn_rate=0.3,
        random_state=42,
        n_jobs=1,
    ):
        self.trees = trees
        self.tree_depth = tree_depth
        self.min_n = min_n
        self.loss_reduction = loss_reduction
        self.sample_size = sample_size
        self.mtry = mtry
        self.learn_rate = learn_rate
        self.random_state = random_state
        self.n_jobs = n_jobs

    def get_params(self) -> dict:
        return {
            "trees": self.trees,
            "tree_depth": self.tree_depth,
            "min_n": self.min_n,
            "loss_reduction": self.loss_reduction,
            "sample_size": self.sample_size,
            "mtry": self.mtry,
            "learn_rate": self.learn_rate,
            "random_state": self.random_state,
            "n_jobs": self.n_jobs,
        }

    def xgboost_params(self) -> dict:
        return {
            "n_estimators": int(self.trees),
            "max_depth": int(self.tree_depth),
            "min_child_weight": float(self.min_n),
            "gamma": float(self.loss_reduction),
            "subsample": float(self.sample_size),
            "colsample_bynode": float(self.mtry),
            "learning_rate": float(self.learn_rate),
            "random_state": int(self.random_state),
            "n_jobs": self.n_jobs,
            "tree_method": "hist",
            "eval_metric": "logloss",
        }

    def fit(self, X, y, **kwargs):
        from xgboost import XGBClassifier

        self.feature_names_ = _feature_names(X)
        self.model = XGBClassifier(**self.xgboost_params())
        self.model.fit(X, np.asarray(y).astype(int), **kwargs)
        return self

    def predict_proba(self, X):
        return self.model.predict_proba(X)

    def predict(self, X):
        return (self.predict_proba(X)[:, 1] >= 0.5).astype(int)

    def importance(self) -> pd.Series:
        """Total gain per predictor; predictors never used for a split get 0."""
        scores = self.model.get_booster().get_score(importance_type="total_gain")
        return pd.Series(
            [float(scores.get(name, 0.0)) for name in self.feature_names_],
            index=self.feature_names_,
        )
