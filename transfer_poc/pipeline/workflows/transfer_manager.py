"""
transfer_manager.py

TransferLearningManager

Capabilities:
- Extract embeddings for labeled images with a frozen feature extractor (InceptionWrapper).
- Train a logistic regression head on (embedding, label) pairs.
- Score a batch of images and evaluate the predictions (log-loss, per-class log-loss, accuracy).
- generate_model: build / train / evaluate from the train and test tags files, printing a report.
- classify_single_image: predict one held-out image and print the result.

Design notes:
- The manager does NOT create the feature extractor: pass an instance implementing
  extract_features_from_path(path) -> (feat, meta).
- Embeddings are cached per image path for the lifetime of the manager, so an image
  is pushed through the network at most once.
- Class keys follow the first appearance of each label in the training data; the
  score vector and per-class log-loss use that order.
- Evaluation skips rows whose label is missing or was never trained on, with a warning.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from ..config import CLASSIFIER_PARAMS, IMAGES_FOLDER, TEST_TAGS_TSV, TRAIN_TAGS_TSV
from ..data.records import ImageData, ImagePrediction
from ..data.tsv import read_from_tsv
from ..models.classifier.classifiers import (class_labels, encode_labels, predict_proba_with_logistic,
                                              train_logistic_regression)
from ..utils.metrics import multiclass_metrics

logger = logging.getLogger(__name__)

BANNER = "==============="


def _banner(title: str) -> str:
    return f"{BANNER} {title} {BANNER}"


class TransferLearningManager:
    """
    Args:
        feature_extractor: instance implementing extract_features_from_path(path)->(feat, meta)
        classifier_params: forwarded to train_logistic_regression (defaults to config.CLASSIFIER_PARAMS)
    """

    def __init__(self, feature_extractor: Any, classifier_params: Optional[Dict[str, Any]] = None):
        if feature_extractor is None:
            raise ValueError("feature_extractor instance required (e.g. InceptionWrapper).")
        self.feature_extractor = feature_extractor
        self.classifier_params = dict(CLASSIFIER_PARAMS if classifier_params is None else classifier_params)

        self.classifier_obj: Optional[Dict[str, Any]] = None
        self._feature_cache: Dict[str, np.ndarray] = {}
        # seconds spent inside the network, summed from the extractor's inference_time
        self.extraction_time = 0.0

    @property
    def is_fitted(self) -> bool:
        return self.classifier_obj is not None

    @property
    def class_labels(self) -> List[str]:
        self._require_fitted()
        return class_labels(self.classifier_obj)

    def _require_fitted(self):
        if self.classifier_obj is None:
            raise RuntimeError("Model not trained. Call fit() or generate_model() first.")

    # -------------------------
    # Features
    # -------------------------
    def features_for(self, records: List[ImageData]) -> np.ndarray:
        """
        (N, D) embedding matrix for records, served from the cache where possible.
        """
        feats = []
        for rec in records:
            key = str(rec.image_path)
            if key not in self._feature_cache:
                feat, meta = self.feature_extractor.extract_features_from_path(key)
                self._feature_cache[key] = np.asarray(feat, dtype=np.float32)
                self.extraction_time += float(meta.get("inference_time", 0.0))
                logger.debug(f"Extracted features for {key}: {meta}")
            feats.append(self._feature_cache[key])
        return np.vstack(feats)

    def clear_cache(self) -> None:
        self._feature_cache.clear()

    # -------------------------
    # Train / predict / evaluate
    # -------------------------
    def fit(self, records: List[ImageData]) -> Dict[str, Any]:
        """
        Train the classifier head on labeled records. Returns training metadata.
        """
        if not records:
            raise ValueError("No training records.")
        unlabeled = [r.image_path for r in records if r.label is None]
        if unlabeled:
            raise ValueError(f"Training records without a label: {unlabeled}")
        spent_before = self.extraction_time
        X = self.features_for(records)
        extraction_time = self.extraction_time - spent_before
        logger.info(f"Extracted {X.shape[0]} training embeddings (dim={X.shape[1]}), "
                    f"network time {extraction_time:.3f}s")
        self.classifier_obj = train_logistic_regression(X, [r.label for r in records], **self.classifier_params)
        self.classifier_obj["meta"]["feature_extraction_time"] = extraction_time
        return self.classifier_obj["meta"]

    def transform(self, records: List[ImageData]) -> List[ImagePrediction]:
        """
        Score records with the fitted model.
        """
        self._require_fitted()
        if not records:
            return []
        probs = predict_proba_with_logistic(self.classifier_obj, self.features_for(records))
        labels = self.class_labels
        predictions = []
        for rec, row in zip(records, probs):
            predictions.append(ImagePrediction(
                image_path=rec.image_path,
                label=rec.label,
                predicted_label=labels[int(np.argmax(row))],
                score=[float(s) for s in row],
            ))
        return predictions

    def predict(self, image_path: Union[str, Path]) -> ImagePrediction:
        return self.transform([ImageData(image_path=str(image_path))])[0]

    def evaluate(self, predictions: List[ImagePrediction]) -> Dict[str, Any]:
        """
        Multiclass metrics for scored records against their labels.

        Rows without a label, or whose label was not seen in training, carry no
        class key and are left out of the metrics (logged as a warning).
        """
        self._require_fitted()
        known = set(self.class_labels)
        scored = [p for p in predictions if p.label in known]
        skipped = [p.image_path for p in predictions if p.label not in known]
        if skipped:
            logger.warning(f"Skipping {len(skipped)} rows without a trained label: {skipped}")
        if not scored:
            raise ValueError("No predictions with a trained label to evaluate.")
        y_true = encode_labels(self.classifier_obj, [p.label for p in scored])
        probs = np.asarray([p.score for p in scored], dtype=np.float64)
        metrics = multiclass_metrics(y_true, probs, self.class_labels)
        metrics["skipped_rows"] = skipped
        return metrics

    # -------------------------
    # Console report
    # -------------------------
    @staticmethod
    def format_prediction(prediction: ImagePrediction) -> str:
        return (f"Image: {prediction.file_name} predicted as: {prediction.predicted_label} "
                f"with score: {prediction.max_score} ")

    def display_results(self, predictions: List[ImagePrediction]) -> None:
        for prediction in predictions:
            print(self.format_prediction(prediction))

    def generate_model(self,
                       train_tsv: Union[str, Path] = TRAIN_TAGS_TSV,
                       test_tsv: Union[str, Path] = TEST_TAGS_TSV,
                       images_folder: Union[str, Path] = IMAGES_FOLDER) -> Dict[str, Any]:
        """
        Build, train and evaluate the model.

        Reads the training tags, fits the classifier, scores the test tags, prints every
        test prediction followed by LogLoss and PerClassLogLoss.

        Returns:
            dict with train_meta, predictions and metrics
        """
        training_data = read_from_tsv(train_tsv, images_folder)

        print(_banner("Training classification model"))
        train_meta = self.fit(training_data)

        test_data = read_from_tsv(test_tsv, images_folder)
        predictions = self.transform(test_data)
        self.display_results(predictions)

        print(_banner("Classification metrics"))
        metrics = self.evaluate(predictions)
        print(f"LogLoss is: {metrics['log_loss']}")
        print(f"PerClassLogLoss is: {' , '.join(str(v) for v in metrics['per_class_log_loss'])}")
        logger.info(f"MicroAccuracy={metrics['micro_accuracy']:.4f} MacroAccuracy={metrics['macro_accuracy']:.4f} "
                    f"LogLossReduction={metrics['log_loss_reduction']:.4f}")
        logger.info(f"Confusion matrix (labels={metrics['class_labels']}): {metrics['confusion_matrix']}")

        return {"train_meta": train_meta, "predictions": predictions, "metrics": metrics}

    def classify_single_image(self, image_path: Union[str, Path]) -> ImagePrediction:
        """
        Predict one image and print its label and confidence.
        """
        prediction = self.predict(image_path)
        print(_banner("Making single image classification"))
        print(self.format_prediction(prediction))
        return prediction
