"""
Session controller: owns the lifecycle of the one active video.
"""

from __future__ import annotations

import logging
import mimetypes
import os
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from display.state import DisplayLayer
from models.config import VideoConfig
from models.counters import FrameCounters
from models.errors import InvalidMediaError
from models.frame import FrameData
from observation.base import FrameSource
from observation.video_file import VideoFileSource, VideoFileSourceConfig
from pipeline.engine import DetectionLoop

SourceFactory = Callable[[str], FrameSource]


def default_source_factory(path: str) -> FrameSource:
    return VideoFileSource(VideoFileSourceConfig.for_path(path))


def validate_video_path(path: str, allowed_extensions: Sequence[str]) -> None:
    """
    Reject paths that cannot be a playable video before trying to decode them.

    Raises:
        InvalidMediaError: Missing file, or neither the extension nor the
            guessed MIME type says video.
    """
    if not path or not os.path.isfile(path):
        raise InvalidMediaError(f"Video file not found: {path}")
    ext = os.path.splitext(path)[1].lower()
    mime, _ = mimetypes.guess_type(path)
    if ext not in allowed_extensions and not (mime or "").startswith("video/"):
        raise InvalidMediaError(f"Not a video file: {os.path.basename(path)}")


@dataclass
class SessionState:
    video_present: bool = False
    counters: FrameCounters = field(default_factory=FrameCounters.zero)
    source_id: Optional[str] = None
    generation: int = 0


class SessionController:
    """
    Accepts and removes videos and relays each tick's counters to the display.

    Only one video is active at a time; remove_video() must run before the
    next accept_video().
    """

    def __init__(
        self,
        loop: DetectionLoop,
        video_cfg: Optional[VideoConfig] = None,
        source_factory: SourceFactory = default_source_factory,
    ):
        self.loop = loop
        self.video_cfg = video_cfg or VideoConfig()
        self.state = SessionState()
        self._source_factory = source_factory
        self._source: Optional[FrameSource] = None
        self._displays: List[DisplayLayer] = []
        loop.add_callback(self._on_tick)
        loop.add_error_callback(self._on_error)

    @property
    def source(self) -> Optional[FrameSource]:
        return self._source

    def add_display(self, display: DisplayLayer) -> None:
        self._displays.append(display)
        display.set_video_present(self.state.video_present)

    def accept_video(self, path: str) -> FrameSource:
        """
        Start a session for the video at `path`: IDLE -> AWAITING_DATA -> READY.

        Raises:
            InvalidMediaError: The file is not a playable video. The session stays idle.
            RuntimeError: A video is already active.
        """
        if self.state.video_present:
            raise RuntimeError("A video is already loaded; remove it first")

        validate_video_path(path, self.video_cfg.allowed_extensions)

        source = self._source_factory(path)
        self.loop.attach(source)
        try:
            source.open()
        except RuntimeError as e:
            self.loop.detach()
            source.close()
            logging.warning(f"Rejected {path}: {e}")
            raise InvalidMediaError(f"Not a playable video: {os.path.basename(path)}") from e

        self._source = source
        self.state = SessionState(
            video_present=True,
            counters=FrameCounters.zero(),
            source_id=source.source_id,
            generation=self.loop.generation,
        )
        for display in self._displays:
            display.set_video_present(True)
            display.publish(self.state.counters)
        logging.info(f"Video accepted: {source.source_id}")
        return source

    def remove_video(self) -> None:
        """Tear down the active session. No-op when no video is loaded."""
        if not self.state.video_present and self._source is None:
            return

        source = self._source
        self.loop.detach()
        if source is not None:
            source.close()
        self._source = None
        self.state = SessionState(generation=self.loop.generation)
        for display in self._displays:
            display.set_video_present(False)
            display.publish(self.state.counters)
        logging.info(f"Video removed: {source.source_id if source else None}")

    def play(self) -> None:
        if self._source is None:
            raise RuntimeError("No video loaded")
        self._source.play()

    def pause(self) -> None:
        if self._source is not None:
            self._source.pause()

    def toggle_playback(self) -> None:
        if self._source is None:
            return
        if self._source.is_playing:
            self.pause()
        else:
            self.play()

    def _on_tick(self, frame_data: FrameData, counters: FrameCounters) -> None:
        if not self.state.video_present:
            return
        self.state.counters = counters
        for display in self._displays:
            display.publish(counters)

    def _on_error(self, error: Exception) -> None:
        for display in self._displays:
            display.set_error(str(error))
