"""
Drawing classified detections onto the render surface.
"""

from __future__ import annotations

from typing import Iterable

from models.detection import ClassifiedDetection
from .surface import RenderSurface

BOX_LINE_WIDTH = 4
LABEL_OFFSET = (5, -10)


def draw_classified(surface: RenderSurface, classified: ClassifiedDetection) -> None:
    """Stroke the display box and write its label just above the top-left corner."""
    pt1, pt2 = classified.display_box.as_int_corners()
    surface.stroke_rect(pt1, pt2, classified.color, BOX_LINE_WIDTH)
    surface.fill_text(
        classified.label,
        (pt1[0] + LABEL_OFFSET[0], pt1[1] + LABEL_OFFSET[1]),
        classified.color,
    )


def draw_all(surface: RenderSurface, classified: Iterable[ClassifiedDetection]) -> None:
    for item in classified:
        draw_classified(surface, item)
