"""
Display layer: published counter state and the OpenCV preview window.
"""

from .state import CounterBoard, DisplayLayer, DisplaySnapshot
from .window import PreviewWindow, compose_idle, compose_preview

__all__ = [
    "CounterBoard",
    "DisplayLayer",
    "DisplaySnapshot",
    "PreviewWindow",
    "compose_idle",
    "compose_preview",
]
