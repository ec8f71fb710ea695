"""Space-filling hyperparameter grids and resampled grid search."""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from scipy.stats import qmc

from hfmort.resampling import Resample, assess_resample, summarize_metrics

logger = logging.getLogger(__name__)

CONFIG_COLUMN = ".config"


@dataclass(frozen=True)
class ParameterRange:
    low: float
    high: float
    log10: bool = False
    integer: bool = False

    def scale(self, u: np.ndarray) -> np.ndarray:
        """Map unit-interval samples onto the parameter range."""
        if self.integer:
            values = np.floor(self.low + u * (self.high - self.low + 1))
            return np.clip(values, self.low, self.high).astype(int)
        values = self.low + u * (self.high - self.low)
        if self.log10:
            return 10**values
        return values


BOOSTED_TREE_SPACE = {
    "tree_depth": ParameterRange(1, 15, integer=True),
    "min_n": ParameterRange(2, 40, integer=True),
    "loss_reduction": ParameterRange(-10, 1.5, log10=True),
    "sample_size": ParameterRange(0.1, 1.0),
    "mtry": ParameterRange(0.1, 1.0),
    "learn_rate": ParameterRange(-3, -0.5, log10=True),
}


def _config_ids(n: int) -> list[str]:
    width = max(2, len(str(n)))
    return [f"Model{i + 1:0{width}d}" for i in range(n)]


def latin_hypercube_grid(
    space: dict[str, ParameterRange], size: int = 20, random_state: int = 42
) -> pd.DataFrame:
    """One candidate per row, sampled with a Latin hypercube over ``space``."""
    if size < 1:
        raise ValueError(f"Grid size must be positive, got {size=}")
    sampler = qmc.LatinHypercube(d=len(space), seed=random_state)
    unit = sampler.random(n=size)
    grid = pd.DataFrame(
        {name: prange.scale(unit[:, i]) for i, (name, prange) in enumerate(space.items())}
    )
    grid.insert(0, CONFIG_COLUMN, _config_ids(size))
    return grid


def _candidate_params(grid: pd.DataFrame) -> list[tuple[str, dict]]:
    candidates = []
    for row in grid.to_dict(orient="records"):
        config = row.pop(CONFIG_COLUMN)
        params = {k: (v.item() if hasattr(v, "item") else v) for k, v in row.items()}
        candidates.append((config, params))
    return candidates


def _assess_candidate(workflow, df, resample, config, params, threshold):
    row, _ = assess_resample(workflow.with_params(**params), df, resample, threshold)
    return {CONFIG_COLUMN: config, **params, **row}


@dataclass
class TuneResults:
    grid: pd.DataFrame
    metrics: pd.DataFrame

    @property
    def param_names(self) -> list[str]:
        return [c for c in self.grid.columns if c != CONFIG_COLUMN]

    def collect_metrics(self, summarize: bool = True) -> pd.DataFrame:
        return summarize_metrics(
            self.metrics, group_columns=[CONFIG_COLUMN, *self.param_names], summarize=summarize
        )

    def show_best(self, metric: str = "roc_auc", n: int = 5) -> pd.DataFrame:
        summary = self.collect_metrics()
        if metric not in set(summary["metric"]):
            raise ValueError(
                f"Unknown {metric=}, available: {sorted(set(summary['metric']))}"
            )
        ranked = summary[summary["metric"] == metric].sort_values(
            "mean", ascending=False, kind="stable"
        )
        return ranked.head(n).reset_index(drop=True)

    def select_best(self, metric: str = "roc_auc") -> dict:
        """Parameters of the candidate with the highest mean; ties keep grid order."""
        best = self.show_best(metric=metric, n=1).iloc[0]
        params = {name: best[name] for name in self.param_names}
        params = {k: (v.item() if hasattr(v, "item") else v) for k, v in params.items()}
        logger.info(f"Best {metric}={best['mean']:.4f} ({best[CONFIG_COLUMN]}): {params}")
        return params


def tune_grid(
    workflow,
    df: pd.DataFrame,
    resamples: list[Resample],
    grid: pd.DataFrame,
    n_jobs: int = -1,
    threshold: float = 0.5,
) -> TuneResults:
    """Evaluate every grid candidate on every resample.

    Candidate/resample pairs are independent fits and run in parallel
    worker processes.
    """
    if grid.empty:
        raise ValueError("Grid has no candidates.")
    candidates = _candidate_params(grid)
    n_tasks = len(candidates) * len(resamples)
    logger.info(
        f"Tuning {workflow.model_name}: {len(candidates)} candidates x "
        f"{len(resamples)} resamples = {n_tasks} fits (n_jobs={n_jobs})"
    )
    rows = Parallel(n_jobs=n_jobs)(
        delayed(_assess_candidate)(workflow, df, resample, config, params, threshold)
        for config, params in candidates
        for resample in resamples
    )
    metrics = pd.DataFrame(rows)
    if metrics["roc_auc"].isna().any():
        logger.warning(
            f"{int(metrics['roc_auc'].isna().sum())} of {n_tasks} fits had a single-class "
            "assessment set, roc_auc is undefined there"
        )
    return TuneResults(grid=grid.reset_index(drop=True), metrics=metrics)


def finalize_workflow(workflow, params: dict):
    return workflow.with_params(**params)

