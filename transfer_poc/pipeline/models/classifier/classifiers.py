"""
classifiers.py

Classifier utilities for the transfer learning head:
 - label -> key mapping, keys numbered by first occurrence in the training labels
 - Logistic Regression (L-BFGS, multinomial) trainer on frozen features
 - probability predictor whose columns follow the key order

The trained object is a plain dict {classifier, labels, meta} so it can be
logged or handed around without a wrapper class.
"""
from typing import Dict, Any, List, Sequence
import time
import logging

import numpy as np
from sklearn.linear_model import LogisticRegression

logger = logging.getLogger(__name__)


def _as_2d(X: np.ndarray) -> np.ndarray:
    X = np.asarray(X, dtype=np.float32)
    return X.reshape(1, -1) if X.ndim == 1 else X


def build_key_order(y: Sequence[str]) -> List[str]:
    """Distinct labels in order of first appearance."""
    return list(dict.fromkeys(y))


def train_logistic_regression(X: np.ndarray, y: Sequence[str], **lr_kwargs) -> Dict[str, Any]:
    """
    Train a multinomial logistic regression (maximum entropy) classifier on features.

    Args:
        X: (N, D) feature matrix
        y: N label strings; class keys follow their first appearance in y
        lr_kwargs: forwarded to sklearn LogisticRegression (C, max_iter, tol, ...)

    Returns:
        dict with fitted classifier, ordered labels, and metadata.
    """
    X = _as_2d(X)
    if X.shape[0] != len(y):
        raise ValueError(f"Got {X.shape[0]} feature rows but {len(y)} labels")
    labels = build_key_order(y)
    if len(labels) < 2:
        raise ValueError(f"Need at least two distinct labels to train, got {labels}")
    key_of = {lab: i for i, lab in enumerate(labels)}
    y_enc = np.asarray([key_of[lab] for lab in y], dtype=np.int64)

    params = {"solver": "lbfgs"}
    params.update(lr_kwargs)
    clf = LogisticRegression(**params)
    t0 = time.time()
    clf.fit(X, y_enc)
    elapsed = time.time() - t0
    logger.info(f"Trained logistic regression on {X.shape[0]} samples, {len(labels)} classes in {elapsed:.3f}s")
    meta = {
        "model_type": "logistic_regression",
        "train_time": elapsed,
        "n_samples": int(X.shape[0]),
        "n_features": int(X.shape[1]),
        "n_classes": int(len(labels)),
    }
    return {"classifier": clf, "labels": labels, "meta": meta}


def class_labels(clf_obj: Dict[str, Any]) -> List[str]:
    """Label strings in the column order of predict_proba."""
    return list(clf_obj["labels"])


def encode_labels(clf_obj: Dict[str, Any], labels: Sequence[str]) -> np.ndarray:
    """
    Map label strings to class keys. Raises ValueError for labels unseen during training.
    """
    key_of = {lab: i for i, lab in enumerate(clf_obj["labels"])}
    unknown = sorted(set(labels) - set(key_of))
    if unknown:
        raise ValueError(f"Labels not seen during training: {unknown}")
    return np.asarray([key_of[lab] for lab in labels], dtype=np.int64)


def predict_proba_with_logistic(clf_obj: Dict[str, Any], X: np.ndarray) -> np.ndarray:
    """
    Class probabilities for features X, shape (N, K), columns ordered like class_labels().
    """
    return clf_obj["classifier"].predict_proba(_as_2d(X))
