"""
Detection models for object detection results and their classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .counters import ScaleFactors


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned bounding box in pixel coordinates.

    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Box width.
        height: Box height.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def scaled(self, scale: ScaleFactors) -> "BoundingBox":
        """Return this box mapped into another surface's coordinates."""
        return BoundingBox(
            x=self.x * scale.scale_x,
            y=self.y * scale.scale_y,
            width=self.width * scale.scale_x,
            height=self.height * scale.scale_y,
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def as_int_corners(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """Return ((x1, y1), (x2, y2)) rounded for drawing."""
        return (
            (int(round(self.x)), int(round(self.y))),
            (int(round(self.x2)), int(round(self.y2))),
        )

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from corner (x1, y1, x2, y2) format."""
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


@dataclass(frozen=True)
class Detection:
    """
    A single detection from an object detector.

    Attributes:
        class_label: Human-readable class name (e.g. "person", "dog").
        bbox: Bounding box in source-surface pixel coordinates.
        confidence: Detection confidence score (0-1).
        class_id: Optional class ID from the detector.
    """
    class_label: str
    bbox: BoundingBox
    confidence: float = 1.0
    class_id: Optional[int] = None

    @classmethod
    def from_xywh(
        cls,
        class_label: str,
        x: float,
        y: float,
        w: float,
        h: float,
        confidence: float = 1.0,
    ) -> "Detection":
        return cls(class_label=class_label, bbox=BoundingBox(x, y, w, h), confidence=confidence)


class Category(str, Enum):
    """Bucket a detection is counted under."""
    ANIMAL = "animal"
    CHILD = "child"
    ADULT_PERSON = "adult_person"
    OTHER = "other"


# RGBA, matching the render surface channel order
CATEGORY_COLORS = {
    Category.ANIMAL: (255, 0, 0, 255),  # red
    Category.CHILD: (0, 0, 255, 255),  # blue
    Category.ADULT_PERSON: (0, 255, 0, 255),  # green
    Category.OTHER: (255, 255, 0, 255),  # yellow
}


@dataclass(frozen=True)
class ClassifiedDetection:
    """
    A detection after classification, positioned on the render surface.

    Attributes:
        detection: The raw detection.
        category: Assigned bucket.
        color: RGBA display color for the category.
        display_box: Bounding box in render-surface pixel coordinates.
    """
    detection: Detection
    category: Category
    color: Tuple[int, int, int, int]
    display_box: BoundingBox

    @property
    def label(self) -> str:
        return f"{self.detection.class_label} ({self.display_box.x:.2f}, {self.display_box.y:.2f})"
