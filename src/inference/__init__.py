"""
Inference layer: object detectors consumed as an async capability.
"""

from .backend import Detector, LazyDetector, ModelHandle

__all__ = [
    "Detector",
    "LazyDetector",
    "ModelHandle",
]
