"""
Entrypoint for the transfer learning demo.

This script:
- Loads the frozen Inception network
- Trains a logistic regression head on the images listed in assets/images/tags.tsv
- Evaluates on assets/images/test-tags.tsv and prints log-loss metrics
- Classifies assets/images/toaster3.jpg

Run from the directory holding `assets/`:
    python -m transfer_poc.pipeline.main
"""
import logging

import numpy as np
import torch

from .config import (FEATURE_LAYER, IMAGES_FOLDER, INCEPTION_MODEL_PATH, PREDICT_SINGLE_IMAGE,
                     SEED, TEST_TAGS_TSV, TRAIN_TAGS_TSV)
from .models.feature_extractor.inception import InceptionWrapper
from .workflows.transfer_manager import TransferLearningManager


def run(model_path=INCEPTION_MODEL_PATH,
        train_tsv=TRAIN_TAGS_TSV,
        test_tsv=TEST_TAGS_TSV,
        images_folder=IMAGES_FOLDER,
        single_image=PREDICT_SINGLE_IMAGE):
    np.random.seed(SEED)
    torch.manual_seed(SEED)

    extractor = InceptionWrapper(model_path=model_path, feature_layer=FEATURE_LAYER)
    manager = TransferLearningManager(extractor)
    results = manager.generate_model(train_tsv=train_tsv, test_tsv=test_tsv, images_folder=images_folder)
    results["single_prediction"] = manager.classify_single_image(single_image)
    return results


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
