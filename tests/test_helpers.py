#!/usr/bin/python3
"""Test helpers used across tests.

Provides a tiny stand-in for the Inception network (so no weights are
downloaded), a fake feature extractor keyed by file name, and small
image / tags file writers.
"""
import os

import numpy as np
import torch.nn as nn
from PIL import Image


class TinyNet(nn.Module):
    """Shaped like GoogLeNet at the seams the wrapper uses: a trailing `fc` head."""

    def __init__(self, num_classes: int = 5):
        super().__init__()
        self.conv = nn.Conv2d(3, 4, kernel_size=3)
        self.pool = nn.AdaptiveAvgPool2d((1, 1))
        self.fc = nn.Linear(4, num_classes)

    def forward(self, x):
        x = self.pool(self.conv(x))
        return self.fc(x.flatten(1))


class FakeExtractor:
    """Returns fixed feature vectors looked up by image file name and records every call."""

    model_name = "fake"
    inference_time = 0.25

    def __init__(self, features):
        self.features = features
        self.calls = []

    def extract_features_from_path(self, image_path):
        self.calls.append(image_path)
        feat = np.asarray(self.features[os.path.basename(image_path)], dtype=np.float32)
        return feat, {"model_name": self.model_name, "feature_dim": int(feat.shape[0]),
                      "inference_time": self.inference_time}


# two well separated clusters per class
CLUSTER_FEATURES = {
    "cat1.jpg": [5.0, 0.1], "cat2.jpg": [4.8, -0.2], "cat3.jpg": [5.3, 0.3],
    "dog1.jpg": [0.2, 5.1], "dog2.jpg": [-0.1, 4.7], "dog3.jpg": [0.4, 5.4],
    "cat_test.jpg": [5.1, 0.0], "dog_test.jpg": [0.0, 5.0],
    "mystery.jpg": [4.9, 0.2],
}


def write_tsv(path, rows):
    with open(path, "w", encoding="utf-8") as f:
        for row in rows:
            f.write("\t".join(row) + "\n")
    return path


def write_image(path, size=(64, 48), color="red"):
    Image.new("RGB", size, color=color).save(path)
    return path
