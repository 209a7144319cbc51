"""
FrameData model for decoded video frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    A decoded frame at the current playback position.

    Attributes:
        frame: Pixel data as a numpy array (BGR, as decoded by OpenCV).
        frame_index: Index of the frame within the video (0-based).
        position_s: Playback position of this frame in seconds.
        source: Identifier of the video the frame came from.
    """
    frame: np.ndarray
    frame_index: int = 0
    position_s: float = 0.0
    source: Optional[str] = None

    @property
    def width(self) -> int:
        return int(self.frame.shape[1])

    @property
    def height(self) -> int:
        return int(self.frame.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
