"""Analysis modules - classification of scored buildings."""

from .classifier import ClassificationBand, Classifier, default_bands

__all__ = [
    "ClassificationBand",
    "Classifier",
    "default_bands",
]
