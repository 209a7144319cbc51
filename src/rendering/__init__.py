"""
Rendering: the annotated render surface, its grayscale pre-processing and overlays.
"""

from .surface import RenderSurface
from .grayscale import to_grayscale
from .overlay import draw_classified, draw_all

__all__ = [
    "RenderSurface",
    "to_grayscale",
    "draw_classified",
    "draw_all",
]
