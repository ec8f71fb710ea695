import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    cohen_kappa_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
    roc_auc_score,
    roc_curve,
)

from hfmort.constants import EVENT_LEVEL

METRICS = ["roc_auc", "accuracy", "sensitivity", "specificity", "precision", "f1", "kappa"]


def compute_metrics(y_true, y_prob, threshold: float = 0.5) -> dict[str, float]:
    """Classification metrics with death (1) as the event of interest."""
    y_true = np.asarray(y_true).astype(int)
    y_prob = np.asarray(y_prob, dtype=float)
    y_pred = (y_prob >= threshold).astype(int)
    roc_auc = (
        float(roc_auc_score(y_true, y_prob))
        if len(np.unique(y_true)) == 2
        else float("nan")
    )
    return {
        "roc_auc": roc_auc,
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "sensitivity": float(recall_score(y_true, y_pred, pos_label=EVENT_LEVEL, zero_division=0)),
        "specificity": float(recall_score(y_true, y_pred, pos_label=1 - EVENT_LEVEL, zero_division=0)),
        "precision": float(precision_score(y_true, y_pred, pos_label=EVENT_LEVEL, zero_division=0)),
        "f1": float(f1_score(y_true, y_pred, pos_label=EVENT_LEVEL, zero_division=0)),
        "kappa": float(cohen_kappa_score(y_true, y_pred)),
    }


def confusion_table(y_true, y_pred) -> pd.DataFrame:
    """2x2 counts, rows are predictions and columns the truth."""
    matrix = confusion_matrix(
        np.asarray(y_true).astype(int), np.asarray(y_pred).astype(int), labels=[0, 1]
    )
    return pd.DataFrame(
        matrix.T,
        index=pd.Index([0, 1], name="prediction"),
        columns=pd.Index([0, 1], name="truth"),
    )


def roc_curve_frame(y_true, y_prob) -> pd.DataFrame:
    fpr, tpr, thresholds = roc_curve(np.asarray(y_true).astype(int), y_prob, pos_label=EVENT_LEVEL)
    return pd.DataFrame(
        {"threshold": thresholds, "specificity": 1 - fpr, "sensitivity": tpr}
    )


def format_metrics(metrics: dict[str, float]) -> str:
    return ", ".join(f"{k}={v:.4f}" for k, v in metrics.items())
