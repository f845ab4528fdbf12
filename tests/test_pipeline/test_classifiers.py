#!/usr/bin/python3
"""Unit tests for the logistic regression head."""
import unittest

import numpy as np

from transfer_poc.pipeline.models.classifier.classifiers import (build_key_order, class_labels, encode_labels,
                                                                 predict_proba_with_logistic,
                                                                 train_logistic_regression)


class TestLogisticRegression(unittest.TestCase):
    """Train / predict on separable clusters."""

    def setUp(self):
        rng = np.random.RandomState(0)
        self.X = np.vstack([
            rng.normal(loc=[4.0, 0.0, 0.0], scale=0.3, size=(6, 3)),
            rng.normal(loc=[0.0, 4.0, 0.0], scale=0.3, size=(6, 3)),
            rng.normal(loc=[0.0, 0.0, 4.0], scale=0.3, size=(6, 3)),
        ]).astype(np.float32)
        self.y = ["teddy"] * 6 + ["food"] * 6 + ["appliance"] * 6
        self.clf_obj = train_logistic_regression(self.X, self.y, max_iter=500)

    def test_meta(self):
        meta = self.clf_obj["meta"]
        self.assertEqual(meta["model_type"], "logistic_regression")
        self.assertEqual(meta["n_samples"], 18)
        self.assertEqual(meta["n_features"], 3)
        self.assertEqual(meta["n_classes"], 3)
        self.assertGreaterEqual(meta["train_time"], 0.0)

    def test_class_keys_follow_first_appearance(self):
        self.assertEqual(class_labels(self.clf_obj), ["teddy", "food", "appliance"])
        self.assertEqual(build_key_order(["dog", "cat", "dog", "bird", "cat"]), ["dog", "cat", "bird"])

    def test_predict_proba_rows_sum_to_one(self):
        probs = predict_proba_with_logistic(self.clf_obj, self.X)
        self.assertEqual(probs.shape, (18, 3))
        np.testing.assert_allclose(probs.sum(axis=1), np.ones(18), rtol=1e-6)

    def test_proba_columns_follow_key_order(self):
        probs = predict_proba_with_logistic(self.clf_obj, np.array([[0.1, 0.0, 4.2], [3.9, 0.2, 0.0]]))
        labels = class_labels(self.clf_obj)
        self.assertEqual([labels[i] for i in np.argmax(probs, axis=1)], ["appliance", "teddy"])
        self.assertTrue(np.all(probs.max(axis=1) > 0.5))

    def test_single_vector(self):
        probs = predict_proba_with_logistic(self.clf_obj, np.array([0.0, 4.1, 0.1]))
        self.assertEqual(probs.shape, (1, 3))
        self.assertEqual(class_labels(self.clf_obj)[int(np.argmax(probs[0]))], "food")

    def test_encode_labels(self):
        np.testing.assert_array_equal(encode_labels(self.clf_obj, ["food", "appliance", "teddy"]), [1, 2, 0])
        with self.assertRaises(ValueError):
            encode_labels(self.clf_obj, ["food", "umbrella"])

    def test_requires_two_classes(self):
        with self.assertRaises(ValueError):
            train_logistic_regression(self.X[:3], ["teddy"] * 3)

    def test_rows_must_match_labels(self):
        with self.assertRaises(ValueError):
            train_logistic_regression(self.X, self.y[:-1])


if __name__ == "__main__":
    unittest.main()
