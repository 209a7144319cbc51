"""
Latest published state for the display layer.

The detection loop writes whole snapshots; readers never see a tick in
progress.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from models.counters import FrameCounters


class DisplayLayer(Protocol):
    def publish(self, counters: FrameCounters) -> None:
        ...

    def set_video_present(self, present: bool) -> None:
        ...

    def set_error(self, message: Optional[str]) -> None:
        ...


@dataclass(frozen=True)
class DisplaySnapshot:
    video_present: bool
    counters: FrameCounters
    error: Optional[str]
    updated_at: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "video_present": self.video_present,
            "error": self.error,
            "updated_at": self.updated_at,
            **self.counters.as_dict(),
        }


class CounterBoard:
    """Holds the most recent counters, the video-present flag and any error."""

    def __init__(self):
        self._video_present = False
        self._counters = FrameCounters.zero()
        self._error: Optional[str] = None
        self._updated_at: Optional[float] = None
        self.publish_count = 0

    def publish(self, counters: FrameCounters) -> None:
        self._counters = counters
        self._updated_at = time.time()
        self.publish_count += 1

    def set_video_present(self, present: bool) -> None:
        self._video_present = present
        if not present:
            self._counters = FrameCounters.zero()
            self._error = None
            self._updated_at = time.time()

    def set_error(self, message: Optional[str]) -> None:
        self._error = message

    def snapshot(self) -> DisplaySnapshot:
        return DisplaySnapshot(
            video_present=self._video_present,
            counters=self._counters,
            error=self._error,
            updated_at=self._updated_at,
        )
