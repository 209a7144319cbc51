"""
FrameSource interface for playable video surfaces.

A frame source wraps something that can be played back (a video file, a
stream) and exposes:
- native pixel dimensions, known once data has loaded
- the decoded frame at the current playback position
- lifecycle signals: data-loaded, play, pause, ended
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from models.frame import FrameData

DATA_LOADED = "data_loaded"
PLAY = "play"
PAUSE = "pause"
ENDED = "ended"


@dataclass
class SourceConfig:
    """
    Base configuration for frame sources.

    Attributes:
        source_id: Identifier for this source (usually the file name).
        fps: Playback rate override. None = use the rate reported by the source.
    """
    source_id: str = "default"
    fps: Optional[float] = None


class FrameSource(ABC):
    """
    Abstract base class for frame sources.

    Lifecycle:
        1. Create instance with config
        2. Call open(); native size becomes available and data-loaded fires
        3. Call play(); current_frame() follows the playback clock
        4. Call close() to release resources

    Can also be used as a context manager:
        with VideoFileSource(config) as source:
            source.play()
            frame_data = source.current_frame()
    """

    def __init__(self, config: SourceConfig):
        self._config = config
        self._is_open = False
        self._is_playing = False
        self._is_ended = False
        self._native_size: Optional[Tuple[int, int]] = None
        self._listeners: Dict[str, List[Callable[..., None]]] = {
            DATA_LOADED: [],
            PLAY: [],
            PAUSE: [],
            ENDED: [],
        }

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_ended(self) -> bool:
        return self._is_ended

    @property
    def native_size(self) -> Tuple[int, int]:
        """(width, height) of decoded frames. Only valid after data has loaded."""
        if self._native_size is None:
            raise RuntimeError(f"Source {self.source_id} has not loaded data yet")
        return self._native_size

    @property
    def has_data(self) -> bool:
        return self._native_size is not None

    def on_data_loaded(self, callback: Callable[[int, int], None]) -> None:
        """Register a callback taking (width, height)."""
        self._listeners[DATA_LOADED].append(callback)
        if self._native_size is not None:
            callback(*self._native_size)

    def on_play(self, callback: Callable[[], None]) -> None:
        self._listeners[PLAY].append(callback)

    def on_pause(self, callback: Callable[[], None]) -> None:
        self._listeners[PAUSE].append(callback)

    def on_ended(self, callback: Callable[[], None]) -> None:
        self._listeners[ENDED].append(callback)

    def _emit(self, event: str, *args) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(*args)
            except Exception as e:
                logging.warning(f"{event} listener error on {self.source_id}: {e}")

    def _set_data_loaded(self, width: int, height: int) -> None:
        self._native_size = (int(width), int(height))
        logging.debug(f"Source {self.source_id} loaded data: {width}x{height}")
        self._emit(DATA_LOADED, int(width), int(height))

    def _set_ended(self) -> None:
        if self._is_ended:
            return
        self._is_ended = True
        self._is_playing = False
        logging.info(f"Source {self.source_id} reached end of stream")
        self._emit(ENDED)

    def play(self) -> None:
        """Start or resume playback."""
        if not self._is_open:
            raise RuntimeError("Source must be open before playing")
        if self._is_playing:
            return
        self._is_playing = True
        self._is_ended = False
        self._emit(PLAY)

    def pause(self) -> None:
        """Pause playback; safe to call when already paused."""
        if not self._is_playing:
            return
        self._is_playing = False
        self._emit(PAUSE)

    @abstractmethod
    def open(self) -> None:
        """
        Open the source and load its metadata.

        Must establish the native size and fire data-loaded.

        Raises:
            RuntimeError: If the source cannot be opened.
        """

    @abstractmethod
    def current_frame(self) -> Optional[FrameData]:
        """
        Return the frame at the current playback position.

        Returns None if no frame could be decoded.
        """

    @abstractmethod
    def close(self) -> None:
        """
        Release the source. Safe to call multiple times.
        """

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
