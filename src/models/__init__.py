"""
Typed models for the video headcount application.
"""

from .frame import FrameData
from .counters import FrameCounters, ScaleFactors
from .detection import (
    BoundingBox,
    Category,
    CATEGORY_COLORS,
    ClassifiedDetection,
    Detection,
)
from .errors import DetectionTickError, InvalidMediaError, ModelLoadError
from .config import (
    Config,
    VideoConfig,
    DetectionConfig,
    ClassificationConfig,
    LoopConfig,
    DisplayConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "BoundingBox",
    "Detection",
    "Category",
    "CATEGORY_COLORS",
    "ClassifiedDetection",
    # Counting
    "FrameCounters",
    "ScaleFactors",
    # Errors
    "InvalidMediaError",
    "ModelLoadError",
    "DetectionTickError",
    # Config
    "Config",
    "VideoConfig",
    "DetectionConfig",
    "ClassificationConfig",
    "LoopConfig",
    "DisplayConfig",
]
