"""
Pipeline module for the video headcount system.

The detection loop orchestrates the per-frame flow:
- Frame acquisition from the playing frame source
- Grayscale pre-processing on the render surface
- Detection, classification and overlay drawing
- Publishing per-frame counters
"""

from .clock import RefreshClock
from .engine import DetectionLoop, LoopState, LoopStats

__all__ = [
    "DetectionLoop",
    "LoopState",
    "LoopStats",
    "RefreshClock",
]
