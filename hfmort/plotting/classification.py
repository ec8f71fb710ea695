import numpy as np
import pandas as pd

import hfmort.constants
from hfmort.plotting.figures import create_figure_axes, save_figure, set_axes


def plot_roc_curve(
    roc: pd.DataFrame | dict[str, pd.DataFrame],
    figure=None,
    axes=None,
    title: str | None = "ROC curve",
    filename: str | None = None,
    font_size=hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    """Sensitivity against 1 - specificity, one line per model when given a dict."""
    figure, axes = create_figure_axes(figure=figure, axes=axes, font_size=font_size)
    curves = roc if isinstance(roc, dict) else {None: roc}
    for label, frame in curves.items():
        axes.step(1 - frame["specificity"], frame["sensitivity"], where="post", label=label)
    axes.plot([0, 1], [0, 1], linestyle="--", color="grey", linewidth=1)
    axes.set_xlim(0, 1)
    axes.set_ylim(0, 1)
    axes.set_aspect("equal")
    if isinstance(roc, dict):
        axes.legend(fontsize=font_size)
    set_axes(axes, title=title, xlabel="1 - specificity", ylabel="sensitivity", fontsize=font_size)
    save_figure(fig=figure, filename=filename)
    return axes


def plot_variable_importance(
    importance: pd.DataFrame,
    n_max: int = 10,
    figure=None,
    axes=None,
    title: str | None = "Variable importance",
    filename: str | None = None,
    font_size=hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    figure, axes = create_figure_axes(figure=figure, axes=axes, font_size=font_size)
    top = importance.head(n_max).iloc[::-1]
    axes.barh(top["variable"], top["importance"])
    set_axes(axes, title=title, xlabel="importance", fontsize=font_size)
    save_figure(fig=figure, filename=filename)
    return axes


def plot_confusion_matrix(
    confusion: pd.DataFrame,
    colormap: str = hfmort.constants.DEFAULT_COLORMAP,
    figure=None,
    axes=None,
    title: str | None = "Confusion matrix",
    filename: str | None = None,
    font_size=hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    figure, axes = create_figure_axes(figure=figure, axes=axes, font_size=font_size)
    counts = confusion.to_numpy()
    axes.imshow(counts, cmap=colormap)
    for (i, j), value in np.ndenumerate(counts):
        axes.text(j, i, str(value), ha="center", va="center", fontsize=font_size)
    axes.set_xticks(range(len(confusion.columns)), [str(c) for c in confusion.columns])
    axes.set_yticks(range(len(confusion.index)), [str(c) for c in confusion.index])
    set_axes(axes, title=title, xlabel="truth", ylabel="prediction", fontsize=font_size)
    save_figure(fig=figure, filename=filename)
    return axes
