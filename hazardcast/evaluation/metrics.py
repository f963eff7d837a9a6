"""
Evaluation Metrics
==================
Validation metrics for the fire classification head and the regression
targets.

Classification:
    - Accuracy
    - POD (Probability of Detection / Recall)
    - FAR (False Alarm Ratio)
    - CSI (Critical Success Index)
    - Precision, F1 Score
    - Brier Score, AUC-ROC

Regression:
    - MAE and RMSE per target column
"""

import numpy as np
from sklearn.metrics import (
    brier_score_loss,
    confusion_matrix,
    mean_absolute_error,
    mean_squared_error,
    roc_auc_score,
)


def compute_classification_metrics(y_true, y_pred_prob, threshold=0.5):
    """
    Compute confusion matrix and derived metrics.

    Args:
        y_true: [N] binary labels (0/1)
        y_pred_prob: [N] predicted probabilities
        threshold: Probability threshold for binary classification

    Returns:
        dict with confusion matrix and metrics, or None if no valid data
    """
    y_true = np.asarray(y_true, dtype=np.float64).ravel()
    y_pred_prob = np.asarray(y_pred_prob, dtype=np.float64).ravel()

    valid = np.isfinite(y_true) & np.isfinite(y_pred_prob)
    y_true = y_true[valid].astype(int)
    y_pred_prob = y_pred_prob[valid]

    if len(y_true) == 0:
        return None

    y_pred_binary = (y_pred_prob >= threshold).astype(int)

    tn, fp, fn, tp = confusion_matrix(y_true, y_pred_binary, labels=[0, 1]).ravel()

    accuracy = (tp + tn) / len(y_true)

    # POD (Probability of Detection) = Hit Rate = Recall
    pod = tp / (tp + fn) if (tp + fn) > 0 else 0.0

    # FAR (False Alarm Ratio)
    far = fp / (fp + tp) if (fp + tp) > 0 else 0.0

    # CSI (Critical Success Index) = Threat Score
    csi = tp / (tp + fp + fn) if (tp + fp + fn) > 0 else 0.0

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    f1 = 2 * tp / (2 * tp + fp + fn) if (2 * tp + fp + fn) > 0 else 0.0

    brier = brier_score_loss(y_true, y_pred_prob)

    if len(np.unique(y_true)) > 1:
        auc = roc_auc_score(y_true, y_pred_prob)
    else:
        auc = np.nan

    return {
        'threshold': threshold,
        'n_samples': len(y_true),
        'n_positive': int(y_true.sum()),
        'tp': int(tp), 'fp': int(fp), 'tn': int(tn), 'fn': int(fn),
        'accuracy': float(accuracy),
        'pod': float(pod),
        'far': float(far),
        'csi': float(csi),
        'precision': float(precision),
        'f1': float(f1),
        'brier': float(brier),
        'auc': float(auc)
    }


def compute_regression_metrics(y_true, y_pred, names=None):
    """
    Per-column MAE and RMSE.

    Args:
        y_true: (N,) or (N, T) targets
        y_pred: predictions, same shape
        names: Optional T column names (defaults to "target_<i>")

    Returns:
        dict name -> {'mae': float, 'rmse': float}, or None if no samples
    """
    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    if y_true.ndim == 1:
        y_true = y_true[:, np.newaxis]
        y_pred = y_pred.reshape(-1, 1)
    if len(y_true) == 0:
        return None

    n_targets = y_true.shape[1]
    names = list(names) if names is not None else [f"target_{i}" for i in range(n_targets)]
    if len(names) != n_targets:
        raise ValueError(f"Expected {n_targets} names, got {len(names)}")

    results = {}
    for i, name in enumerate(names):
        mae = mean_absolute_error(y_true[:, i], y_pred[:, i])
        rmse = np.sqrt(mean_squared_error(y_true[:, i], y_pred[:, i]))
        results[name] = {'mae': float(mae), 'rmse': float(rmse)}
    return results
