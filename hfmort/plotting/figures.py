import logging
from pathlib import Path

import matplotlib.pyplot as plt

import hfmort.constants

logger = logging.getLogger(__name__)


def create_figure_axes(
    figure=None,
    axes=None,
    figure_size: tuple[float, float] = hfmort.constants.DEFAULT_FIGURE_SIZE,
    font_size: float = hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    if axes is not None:
        return axes.get_figure(), axes
    if figure is None:
        figure = plt.figure(figsize=figure_size)
    axes = figure.add_subplot(1, 1, 1)
    axes.tick_params(labelsize=font_size)
    return figure, axes


def save_figure(
    fig: hfmort.constants.TYPE_MATPLOTLIB_FIGURES,
    filename: hfmort.constants.TYPE_FILEPATHS | None = None,
    dpi: int = 150,
):
    if filename is None:
        return
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    logger.info(f"Saved figure to {path}")


def set_axes(
    ax,
    title: str | None = None,
    xlabel: str | None = None,
    ylabel: str | None = None,
    fontsize: float = hfmort.constants.DEFAULT_FONTSIZE_SMALL,
):
    if title is not None:
        ax.set_title(title, fontsize=fontsize)
    if xlabel is not None:
        ax.set_xlabel(xlabel, fontsize=fontsize)
    if ylabel is not None:
        ax.set_ylabel(ylabel, fontsize=fontsize)
    return ax
