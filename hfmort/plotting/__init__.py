from hfmort.plotting.classification import (
    plot_confusion_matrix,
    plot_roc_curve,
    plot_variable_importance,
)
from hfmort.plotting.figures import create_figure_axes, save_figure
from hfmort.plotting.tuning import plot_resample_metrics, plot_tuning_results

__all__ = [
    "create_figure_axes",
    "save_figure",
    "plot_roc_curve",
    "plot_variable_importance",
    "plot_confusion_matrix",
    "plot_tuning_results",
    "plot_resample_metrics",
]
