#!/usr/bin/python3
"""
Configuration constants for the transfer learning pipeline.
Adjust paths and constants here.
"""
import os
import torch
from pathlib import Path

# Device
DEVICE = "cuda" if torch.cuda.is_available() else "cpu"

# Asset paths (resolved against the working directory the program runs from)
ASSETS_PATH = Path(os.getcwd()) / "assets"
IMAGES_FOLDER = ASSETS_PATH / "images"
INCEPTION_MODEL_PATH = ASSETS_PATH / "inception" / "googlenet.pth"
PREDICT_SINGLE_IMAGE = IMAGES_FOLDER / "toaster3.jpg"
TEST_TAGS_TSV = IMAGES_FOLDER / "test-tags.tsv"
TRAIN_TAGS_TSV = IMAGES_FOLDER / "tags.tsv"

# Inception backbone (torchvision GoogLeNet is Inception v1)
INCEPTION_TYPE = "googlenet"
IMAGE_HEIGHT = 224
IMAGE_WIDTH = 224
IMAGE_SIZE = (IMAGE_HEIGHT, IMAGE_WIDTH)
IMAGENET_MEAN = [0.485, 0.456, 0.406]
IMAGENET_STD = [0.229, 0.224, 0.225]
# "logits" -> pre-softmax activations (1000-d), "pool" -> pooled features (1024-d)
FEATURE_LAYER = "logits"

# L-BFGS maximum entropy trainer
CLASSIFIER_PARAMS = {"C": 1.0, "max_iter": 1000, "tol": 1e-7}

SEED = 0
