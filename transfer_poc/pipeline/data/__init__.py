from .records import ImageData, ImagePrediction
from .tsv import read_from_tsv

__all__ = ["ImageData", "ImagePrediction", "read_from_tsv"]
