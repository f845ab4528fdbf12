"""
Evaluation metrics utilities.

Multiclass metrics for a probabilistic classifier:
 - log-loss (overall and per class) on the probability matrix
 - log-loss reduction relative to the class-prior predictor
 - micro / macro accuracy and the confusion matrix via sklearn

Inputs are encoded class indices (0..K-1) plus an (N, K) probability matrix
whose columns follow the same encoding.
"""
from typing import List, Dict, Any, Sequence

import numpy as np
from sklearn.metrics import accuracy_score, confusion_matrix, recall_score

LOG_LOSS_EPS = 1e-15


def _true_class_probs(y_true: Sequence[int], probs: np.ndarray) -> np.ndarray:
    y = np.asarray(y_true, dtype=np.int64)
    p = np.asarray(probs, dtype=np.float64)
    if p.ndim != 2 or p.shape[0] != y.shape[0]:
        raise ValueError(f"probs shape {p.shape} does not match {y.shape[0]} labels")
    return np.clip(p[np.arange(y.shape[0]), y], LOG_LOSS_EPS, 1.0)


def multiclass_log_loss(y_true: Sequence[int], probs: np.ndarray) -> float:
    """
    Mean of -ln(p_true) over all rows. Probabilities are clipped to [eps, 1].
    """
    if len(y_true) == 0:
        return 0.0
    return float(np.mean(-np.log(_true_class_probs(y_true, probs))))


def per_class_log_loss(y_true: Sequence[int], probs: np.ndarray, n_classes: int) -> List[float]:
    """
    Log-loss restricted to the rows of each class, in class index order.
    Classes without rows report 0.0.
    """
    y = np.asarray(y_true, dtype=np.int64)
    losses = -np.log(_true_class_probs(y, probs)) if y.size else np.zeros(0)
    result = []
    for k in range(n_classes):
        mask = y == k
        result.append(float(np.mean(losses[mask])) if mask.any() else 0.0)
    return result


def log_loss_reduction(y_true: Sequence[int], probs: np.ndarray, n_classes: int) -> float:
    """
    Relative improvement of the model's log-loss over always predicting the
    class priors of y_true: (prior_ll - ll) / prior_ll. 0.0 when the prior
    log-loss is zero (a single class).
    """
    y = np.asarray(y_true, dtype=np.int64)
    if y.size == 0:
        return 0.0
    priors = np.bincount(y, minlength=n_classes) / float(y.size)
    prior_ll = multiclass_log_loss(y, np.tile(priors, (y.size, 1)))
    if prior_ll == 0.0:
        return 0.0
    return float((prior_ll - multiclass_log_loss(y, probs)) / prior_ll)


def classification_metrics(y_true: Sequence[int], y_pred: Sequence[int], n_classes: int) -> Dict[str, Any]:
    """
    Compute accuracy style metrics on encoded labels.

    Returns:
        dict with keys: micro_accuracy, macro_accuracy, confusion_matrix (K x K nested lists,
        rows = truth, columns = prediction)
    """
    labels = list(range(n_classes))
    return {
        "micro_accuracy": float(accuracy_score(y_true, y_pred)),
        # mean per-class recall over the classes present in y_true
        "macro_accuracy": float(recall_score(y_true, y_pred, labels=sorted(set(int(c) for c in y_true)),
                                             average="macro", zero_division=0)),
        "confusion_matrix": confusion_matrix(y_true, y_pred, labels=labels).tolist(),
    }


def multiclass_metrics(y_true: Sequence[int], probs: np.ndarray, class_labels: List[str]) -> Dict[str, Any]:
    """
    Full evaluation bundle reported by the pipeline.

    Args:
        y_true: encoded ground truth indices
        probs: (N, K) class probabilities
        class_labels: label string for each column of probs

    Returns:
        dict with log_loss, per_class_log_loss, log_loss_reduction, micro_accuracy,
        macro_accuracy, confusion_matrix and class_labels
    """
    n_classes = len(class_labels)
    probs = np.asarray(probs, dtype=np.float64)
    y_pred = np.argmax(probs, axis=1) if probs.size else np.zeros(0, dtype=np.int64)
    out = {
        "class_labels": list(class_labels),
        "log_loss": multiclass_log_loss(y_true, probs),
        "per_class_log_loss": per_class_log_loss(y_true, probs, n_classes),
        "log_loss_reduction": log_loss_reduction(y_true, probs, n_classes),
    }
    out.update(classification_metrics(y_true, y_pred, n_classes))
    return out
