"""
Render surface: the RGBA pixel buffer that receives each frame and its overlays.

The same buffer is shown to the user and fed to the detector.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

Color = Tuple[int, int, int, int]


class RenderSurface:
    """
    Fixed-size RGBA buffer (height x width x 4, uint8).

    The surface is unsized until configure() is called with the frame
    source's native resolution. While bound to a video it refuses to be
    resized; detach() releases it so the next video can size it again.
    """

    def __init__(self):
        self._buffer: Optional[np.ndarray] = None
        self._bound = False

    @property
    def is_sized(self) -> bool:
        return self._buffer is not None

    @property
    def is_bound(self) -> bool:
        return self._bound

    @property
    def width(self) -> int:
        return 0 if self._buffer is None else int(self._buffer.shape[1])

    @property
    def height(self) -> int:
        return 0 if self._buffer is None else int(self._buffer.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def pixels(self) -> np.ndarray:
        if self._buffer is None:
            raise RuntimeError("Render surface has not been sized")
        return self._buffer

    def configure(self, width: int, height: int) -> None:
        """Size the surface and bind it to the active video."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        if self._bound and self.size != (width, height):
            raise RuntimeError(
                f"Render surface is bound at {self.width}x{self.height}; "
                f"detach before resizing to {width}x{height}"
            )
        if self.size != (width, height):
            self._buffer = np.zeros((height, width, 4), dtype=np.uint8)
        self._bound = True
        logging.debug(f"Render surface configured: {width}x{height}")

    def detach(self) -> None:
        """Unbind from the active video and release the buffer."""
        self._buffer = None
        self._bound = False

    def clear(self) -> None:
        self.pixels.fill(0)

    def draw_frame(self, frame: np.ndarray) -> None:
        """
        Draw a decoded BGR frame over the whole surface.

        Frames of a different size are stretched to fill the surface.
        """
        buf = self.pixels
        if frame.shape[1] != self.width or frame.shape[0] != self.height:
            frame = cv2.resize(frame, (self.width, self.height), interpolation=cv2.INTER_LINEAR)
        if frame.ndim == 2:
            cv2.cvtColor(frame, cv2.COLOR_GRAY2RGBA, dst=buf)
        elif frame.shape[2] == 4:
            cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA, dst=buf)
        else:
            cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA, dst=buf)

    def stroke_rect(self, pt1: Tuple[int, int], pt2: Tuple[int, int], color: Color, line_width: int) -> None:
        cv2.rectangle(self.pixels, pt1, pt2, color, line_width)

    def fill_text(
        self,
        text: str,
        origin: Tuple[int, int],
        color: Color,
        font_scale: float = 0.6,
        thickness: int = 2,
    ) -> None:
        """Draw text with its baseline starting at origin."""
        cv2.putText(
            self.pixels,
            text,
            origin,
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            color,
            thickness,
            cv2.LINE_AA,
        )

    def snapshot_bgr(self) -> np.ndarray:
        """Copy of the surface as a BGR image (for display or the detector)."""
        return cv2.cvtColor(self.pixels, cv2.COLOR_RGBA2BGR)
