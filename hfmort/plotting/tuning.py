import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

import hfmort.constants
from hfmort.plotting.figures import save_figure, set_axes

LOG_SCALE_PARAMETERS = {"loss_reduction", "learn_rate"}


def plot_tuning_results(
    summary: pd.DataFrame,
    param_names: list[str],
    metric: str = "roc_auc",
    n_columns: int = 3,
    filename: str | None = None,
    font_size=hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    """Mean resampled metric against each hyperparameter, one panel per parameter."""
    data = summary[summary["metric"] == metric]
    n_rows = int(np.ceil(len(param_names) / n_columns))
    figure, axes_grid = plt.subplots(
        n_rows, n_columns, figsize=(4 * n_columns, 3.5 * n_rows), squeeze=False
    )
    for axes, name in zip(axes_grid.ravel(), param_names):
        axes.scatter(data[name], data["mean"])
        if name in LOG_SCALE_PARAMETERS:
            axes.set_xscale("log")
        set_axes(axes, xlabel=name, ylabel=metric, fontsize=font_size)
    for axes in axes_grid.ravel()[len(param_names) :]:
        axes.set_visible(False)
    figure.tight_layout()
    save_figure(fig=figure, filename=filename)
    return axes_grid


def plot_resample_metrics(
    metrics: dict[str, pd.DataFrame],
    metric: str = "roc_auc",
    filename: str | None = None,
    font_size=hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    """Box plot of per-resample scores for each model."""
    figure, axes = plt.subplots(figsize=hfmort.constants.DEFAULT_FIGURE_SIZE)
    labels = list(metrics)
    axes.boxplot([metrics[name][metric].dropna() for name in labels])
    axes.set_xticks(range(1, len(labels) + 1), labels)
    set_axes(axes, title=f"Resampled {metric}", ylabel=metric, fontsize=font_size)
    save_figure(fig=figure, filename=filename)
    return axes
