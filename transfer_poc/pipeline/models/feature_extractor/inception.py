"""
inception.py

Frozen Inception (torchvision GoogLeNet) feature extractor.

The network is only ever run forward: weights are frozen, the model stays in
eval mode and inference happens under torch.no_grad(). It provides the same
interface as the other extractors in the pipeline:

    feat, meta = wrapper.extract_features_from_path(image_path)

Where:
 - feat is a 1-D numpy float32 vector
 - meta is a dict with keys: model_name, device, feature_dim, feature_layer, inference_time

Feature layers:
 - "logits": pre-softmax activations of the ImageNet head (1000-d)
 - "pool":   globally pooled features feeding the head (1024-d)
"""
from typing import Tuple, Dict, Any, Optional, Union
import time
import logging
from pathlib import Path

import numpy as np
from PIL import Image
import torch
import torch.nn as nn
from torchvision import transforms, models

from ...config import (DEVICE, FEATURE_LAYER, IMAGE_SIZE, IMAGENET_MEAN, IMAGENET_STD,
                       INCEPTION_MODEL_PATH, INCEPTION_TYPE)

logger = logging.getLogger(__name__)

FEATURE_LAYERS = ("logits", "pool")


class InceptionWrapper:
    """
    Inception wrapper to extract image embeddings from a frozen pretrained network.

    Args:
        model_path: torch state dict for the network. When the file does not exist the
                    torchvision pretrained ImageNet weights are used instead.
        feature_layer: "logits" or "pool"
        device: "cpu" or "cuda"
    """

    def __init__(self,
                 model_path: Optional[Union[str, Path]] = INCEPTION_MODEL_PATH,
                 feature_layer: str = FEATURE_LAYER,
                 device: Optional[str] = None):
        if feature_layer not in FEATURE_LAYERS:
            raise ValueError(f"Unknown feature_layer '{feature_layer}'. Use one of {FEATURE_LAYERS}.")
        self.model_name = INCEPTION_TYPE
        self.feature_layer = feature_layer
        requested = device or DEVICE
        self.device = requested if torch.cuda.is_available() and requested.startswith("cuda") else "cpu"

        self.model = self._load_backbone(model_path)
        if self.feature_layer == "pool":
            # drop the ImageNet head, keep the pooled features
            self.model.fc = nn.Identity()
        self.model.requires_grad_(False)
        self.model.eval()
        self.model.to(self.device)

        # Preprocessing: fixed-size resize (no crop) + ImageNet normalization
        self.transform = transforms.Compose([
            transforms.Resize(IMAGE_SIZE),
            transforms.ToTensor(),
            transforms.Normalize(mean=IMAGENET_MEAN, std=IMAGENET_STD),
        ])

        # Feature dimensionality from a dummy forward
        with torch.no_grad():
            dummy = torch.zeros((1, 3, *IMAGE_SIZE), device=self.device)
            self.feature_dim = int(torch.flatten(self.model(dummy), 1).shape[1])
        logger.info(f"{self.model_name} feature extractor loaded on {self.device}, "
                    f"layer={self.feature_layer}, feature_dim={self.feature_dim}")

    def _load_backbone(self, model_path: Optional[Union[str, Path]]) -> nn.Module:
        if model_path is not None and Path(model_path).is_file():
            logger.info(f"Loading {self.model_name} weights from {model_path}")
            model = models.googlenet(weights=None, aux_logits=False, transform_input=True, init_weights=False)
            state_dict = torch.load(str(model_path), map_location="cpu")
            model.load_state_dict(state_dict)
            return model
        logger.info(f"No weights file at {model_path}; using torchvision pretrained {self.model_name}")
        return models.googlenet(weights=models.GoogLeNet_Weights.DEFAULT)

    def load_image(self, image_path: Union[str, Path]) -> Image.Image:
        """Decode an image file as RGB. Missing or unreadable files raise."""
        with Image.open(image_path) as img:
            return img.convert("RGB")

    def preprocess(self, image: Image.Image) -> torch.Tensor:
        """
        Resize, convert and normalize a PIL image into a (1, 3, H, W) tensor on device.
        """
        return self.transform(image).unsqueeze(0).to(self.device)

    def extract_features_from_path(self, image_path: Union[str, Path]) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Extract a feature vector for the given image path.

        Returns:
            feat (np.ndarray): 1-D float32 vector of length feature_dim
            meta (dict): model_name, device, feature_dim, feature_layer, inference_time (seconds, decode to features)
        """
        t0 = time.time()
        x = self.preprocess(self.load_image(image_path))
        with torch.no_grad():
            feat = torch.flatten(self.model(x), 1).cpu().numpy().reshape(-1)
        elapsed = time.time() - t0
        meta = {
            "model_name": self.model_name,
            "device": self.device,
            "feature_dim": int(feat.shape[0]),
            "feature_layer": self.feature_layer,
            "inference_time": float(elapsed),
        }
        return feat.astype(np.float32), meta

