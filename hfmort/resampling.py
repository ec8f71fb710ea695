import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.model_selection import ShuffleSplit, StratifiedShuffleSplit

from hfmort.constants import OUTCOME
from hfmort.evaluate import compute_metrics

logger = logging.getLogger(__name__)


@dataclass
class Resample:
    id: str
    analysis: np.ndarray
    assessment: np.ndarray


def mc_cv(
    df: pd.DataFrame,
    prop: float = 0.9,
    times: int = 25,
    strata: str | None = OUTCOME,
    random_state: int = 42,
) -> list[Resample]:
    """Monte-Carlo cross-validation: ``times`` random analysis/assessment splits."""
    if strata is not None:
        splitter = StratifiedShuffleSplit(
            n_splits=times, train_size=prop, random_state=random_state
        )
        splits = splitter.split(df, df[strata].astype(int))
    else:
        splitter = ShuffleSplit(n_splits=times, train_size=prop, random_state=random_state)
        splits = splitter.split(df)
    width = len(str(times))
    return [
        Resample(id=f"Resample{i + 1:0{max(width, 2)}d}", analysis=analysis, assessment=assessment)
        for i, (analysis, assessment) in enumerate(splits)
    ]


def assess_resample(workflow, df: pd.DataFrame, resample: Resample, threshold: float = 0.5):
    """Fit on the analysis rows, score the assessment rows."""
    analysis = df.iloc[resample.analysis]
    assessment = df.iloc[resample.assessment]
    fitted = workflow.with_params().fit(analysis)
    y_true = assessment[workflow.recipe.outcome].astype(int)
    y_prob = fitted.predict_proba(assessment)
    metrics = compute_metrics(y_true, y_prob, threshold)
    predictions = pd.DataFrame(
        {"id": resample.id, "row": assessment.index, "truth": y_true.values, "prob": y_prob}
    )
    return {"id": resample.id, **metrics}, predictions


@dataclass
class ResampleResults:
    metrics: pd.DataFrame
    predictions: pd.DataFrame | None = None

    def collect_metrics(self, summarize: bool = True) -> pd.DataFrame:
        return summarize_metrics(self.metrics, group_columns=[], summarize=summarize)


def summarize_metrics(
    metrics: pd.DataFrame, group_columns: list[str], summarize: bool = True
) -> pd.DataFrame:
    """Long table of mean, n and standard error per metric (and group)."""
    metric_columns = [c for c in metrics.columns if c not in [*group_columns, "id"]]
    long = metrics.melt(
        id_vars=[*group_columns, "id"],
        value_vars=metric_columns,
        var_name="metric",
        value_name="estimate",
    )
    if not summarize:
        return long
    keys = [*group_columns, "metric"]
    summary = (
        long.groupby(keys, sort=False)["estimate"]
        .agg(mean="mean", n="count", std="std")
        .reset_index()
    )
    summary["std_err"] = summary["std"] / np.sqrt(summary["n"])
    return summary.drop(columns=["std"])


def fit_resamples(
    workflow,
    df: pd.DataFrame,
    resamples: list[Resample],
    n_jobs: int = 1,
    save_pred: bool = False,
    threshold: float = 0.5,
) -> ResampleResults:
    logger.info(f"Fitting {workflow.model_name} on {len(resamples)} resamples")
    outputs = Parallel(n_jobs=n_jobs)(
        delayed(assess_resample)(workflow, df, resample, threshold)
        for resample in resamples
    )
    metrics = pd.DataFrame([row for row, _ in outputs])
    predictions = (
        pd.concat([pred for _, pred in outputs], ignore_index=True) if save_pred else None
    )
    return ResampleResults(metrics=metrics, predictions=predictions)
