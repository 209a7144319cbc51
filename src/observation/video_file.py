"""
OpenCV-based video file source.

Decodes a local video file with cv2.VideoCapture and follows a wall-clock
playback position, so current_frame() always returns the frame that a
player would be showing right now. Frames that fall between two reads are
skipped with grab() rather than decoded.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import cv2
import numpy as np

from models.frame import FrameData
from .base import FrameSource, SourceConfig

DEFAULT_FPS = 30.0


@dataclass
class VideoFileSourceConfig(SourceConfig):
    """
    Configuration for a video file source.

    Attributes:
        path: Path to the video file.
    """
    path: str = ""

    @classmethod
    def for_path(cls, path: str, fps: Optional[float] = None) -> "VideoFileSourceConfig":
        return cls(source_id=os.path.basename(path) or path, fps=fps, path=path)


class VideoFileSource(FrameSource):
    """
    Frame source for a local video file.

    Example:
        source = VideoFileSource(VideoFileSourceConfig.for_path("clip.mp4"))
        source.on_data_loaded(lambda w, h: print(w, h))
        source.open()
        source.play()
        frame_data = source.current_frame()
    """

    def __init__(self, config: VideoFileSourceConfig, clock: Callable[[], float] = time.monotonic):
        super().__init__(config)
        self._file_config = config
        self._clock = clock
        self._cap: Optional[cv2.VideoCapture] = None
        self._fps = DEFAULT_FPS
        self._frame_count: Optional[int] = None
        self._decoded_index = -1
        self._last_frame: Optional[np.ndarray] = None
        # Playback clock: position = anchor_position + (now - anchor_time) while playing
        self._anchor_position = 0.0
        self._anchor_time: Optional[float] = None

    @property
    def path(self) -> str:
        return self._file_config.path

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def frame_count(self) -> Optional[int]:
        return self._frame_count

    @property
    def position_s(self) -> float:
        """Current playback position in seconds."""
        if self._is_playing and self._anchor_time is not None:
            return self._anchor_position + (self._clock() - self._anchor_time)
        return self._anchor_position

    def open(self) -> None:
        if self._is_open:
            return

        self._cap = cv2.VideoCapture(self.path)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise RuntimeError(f"Failed to open video {self.path}")

        reported_fps = self._cap.get(cv2.CAP_PROP_FPS)
        self._fps = self._file_config.fps or (reported_fps if reported_fps and reported_fps > 0 else DEFAULT_FPS)
        frame_count = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT))
        self._frame_count = frame_count if frame_count > 0 else None

        width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        # Decode the first frame: proves the file is playable and fills in
        # dimensions for containers that do not report them.
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self._cap.release()
            self._cap = None
            raise RuntimeError(f"Video {self.path} contains no decodable frames")
        self._decoded_index = 0
        self._last_frame = frame
        if width <= 0 or height <= 0:
            height, width = frame.shape[:2]

        self._is_open = True
        self._is_ended = False
        self._anchor_position = 0.0
        self._anchor_time = None

        logging.info(
            f"VideoFileSource opened: source_id={self.source_id}, "
            f"resolution={width}x{height}, fps={self._fps:.2f}, frames={self._frame_count}"
        )
        self._set_data_loaded(width, height)

    def play(self) -> None:
        if self._is_playing:
            return
        if self._is_ended:
            self.seek(0.0)
        self._anchor_time = self._clock()
        super().play()

    def pause(self) -> None:
        if not self._is_playing:
            return
        self._anchor_position = self.position_s
        self._anchor_time = None
        super().pause()

    def seek(self, position_s: float) -> None:
        """Move the playback position; decoding restarts from there."""
        position_s = max(0.0, position_s)
        self._anchor_position = position_s
        if self._anchor_time is not None:
            self._anchor_time = self._clock()
        if self._cap is not None:
            index = int(position_s * self._fps)
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, index)
            self._decoded_index = index - 1
            self._last_frame = None
        self._is_ended = False

    def current_frame(self) -> Optional[FrameData]:
        if not self._is_open or self._cap is None:
            return None

        position = self.position_s
        target = int(position * self._fps)
        if self._frame_count is not None and target >= self._frame_count:
            target = self._frame_count - 1
            self._finish_at(target / self._fps)

        if target < self._decoded_index:
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, target)
            self._decoded_index = target - 1

        if target > self._decoded_index or self._last_frame is None:
            # Skip intermediate frames without decoding them
            while self._decoded_index < target - 1:
                if not self._cap.grab():
                    break
                self._decoded_index += 1
            ret, frame = self._cap.read()
            if ret and frame is not None:
                self._decoded_index += 1
                self._last_frame = frame
            else:
                # Reported frame count can overshoot the real stream length
                self._finish_at(position)

        if self._last_frame is None:
            return None

        return FrameData(
            frame=self._last_frame,
            frame_index=self._decoded_index,
            position_s=self._decoded_index / self._fps,
            source=self.source_id,
        )

    def _finish_at(self, position_s: float) -> None:
        self._anchor_position = position_s
        self._anchor_time = None
        self._set_ended()

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        was_open = self._is_open
        self._is_open = False
        self._is_playing = False
        self._last_frame = None
        if was_open:
            logging.info(f"VideoFileSource closed: source_id={self.source_id}")

    def get_video_info(self) -> Dict[str, Any]:
        """Get information about the opened video."""
        if not self._is_open:
            return {}
        width, height = self.native_size
        return {
            "width": width,
            "height": height,
            "fps": self._fps,
            "frame_count": self._frame_count,
            "duration_s": self._frame_count / self._fps if self._frame_count else None,
        }
