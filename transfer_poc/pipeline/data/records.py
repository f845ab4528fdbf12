"""
Record types flowing through the pipeline.

ImageData is one row of a tags file; ImagePrediction is the same row after
the fitted model has scored it.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ImageData:
    image_path: str
    label: Optional[str] = None

    @property
    def file_name(self) -> str:
        return os.path.basename(self.image_path)


@dataclass
class ImagePrediction(ImageData):
    """
    Scored image. `score` is ordered like the fitted model's class labels.
    """
    predicted_label: str = ""
    score: List[float] = field(default_factory=list)

    @property
    def max_score(self) -> float:
        if not self.score:
            raise ValueError(f"No scores recorded for {self.image_path}")
        return float(max(self.score))
