"""
OpenCV preview window: the original video next to the annotated copy.
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from .state import DisplaySnapshot

# Colors (BGR)
COLOR_ADULT = (0, 255, 0)
COLOR_CHILD = (255, 0, 0)
COLOR_ANIMAL = (0, 0, 255)
COLOR_ERROR = (0, 0, 255)
COLOR_TEXT = (255, 255, 255)

KEY_ACTIONS = {
    ord(" "): "toggle",
    ord("r"): "remove",
    ord("q"): "quit",
    27: "quit",  # Esc
}


def _draw_counters(canvas: np.ndarray, snapshot: DisplaySnapshot) -> None:
    counters = snapshot.counters
    lines = [
        (f"Adults: {counters.adult_count}", COLOR_ADULT),
        (f"Children: {counters.child_count}", COLOR_CHILD),
        (f"Animals: {counters.animal_count}", COLOR_ANIMAL),
    ]
    if snapshot.error:
        lines.append((f"Error: {snapshot.error}", COLOR_ERROR))

    font = cv2.FONT_HERSHEY_SIMPLEX
    y = 30
    for text, color in lines:
        (tw, th), _ = cv2.getTextSize(text, font, 0.7, 2)
        cv2.rectangle(canvas, (6, y - th - 6), (14 + tw, y + 6), (0, 0, 0), -1)
        cv2.putText(canvas, text, (10, y), font, 0.7, color, 2, cv2.LINE_AA)
        y += th + 16


def compose_preview(
    original: np.ndarray,
    annotated: np.ndarray,
    snapshot: DisplaySnapshot,
    max_width: int = 1600,
) -> np.ndarray:
    """
    Place both BGR images side by side and overlay the counters.

    The annotated image is resized to the original's height if needed; the
    result is scaled down to fit max_width.
    """
    h = original.shape[0]
    if annotated.shape[0] != h:
        w = int(round(annotated.shape[1] * h / annotated.shape[0]))
        annotated = cv2.resize(annotated, (w, h))
    canvas = cv2.hconcat([original, annotated])
    if canvas.shape[1] > max_width:
        factor = max_width / canvas.shape[1]
        canvas = cv2.resize(canvas, (max_width, int(round(canvas.shape[0] * factor))))
    _draw_counters(canvas, snapshot)
    return canvas


def compose_idle(snapshot: DisplaySnapshot, size=(960, 540)) -> np.ndarray:
    """Placeholder shown while no video is loaded."""
    width, height = size
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    cv2.putText(
        canvas,
        "No video loaded",
        (width // 2 - 150, height // 2),
        cv2.FONT_HERSHEY_SIMPLEX,
        1.0,
        COLOR_TEXT,
        2,
        cv2.LINE_AA,
    )
    _draw_counters(canvas, snapshot)
    return canvas


class PreviewWindow:
    """Thin wrapper over cv2.imshow / cv2.waitKey."""

    def __init__(self, window_name: str = "Video Headcount", max_width: int = 1600):
        self.window_name = window_name
        self.max_width = max_width
        self._opened = False

    def show(self, original: np.ndarray, annotated: np.ndarray, snapshot: DisplaySnapshot) -> None:
        self._imshow(compose_preview(original, annotated, snapshot, self.max_width))

    def show_idle(self, snapshot: DisplaySnapshot) -> None:
        self._imshow(compose_idle(snapshot))

    def _imshow(self, image: np.ndarray) -> None:
        cv2.imshow(self.window_name, image)
        self._opened = True

    def poll_action(self) -> Optional[str]:
        """Pump the window event queue; return "toggle", "remove", "quit" or None."""
        key = cv2.waitKey(1) & 0xFF
        return KEY_ACTIONS.get(key)

    def close(self) -> None:
        if self._opened:
            cv2.destroyWindow(self.window_name)
            self._opened = False
            logging.debug(f"Preview window {self.window_name} closed")
