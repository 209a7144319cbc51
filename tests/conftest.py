"""
Pytest configuration and shared fixtures.
"""

import asyncio
import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.detection import Detection  # noqa: E402
from models.errors import ModelLoadError  # noqa: E402
from models.frame import FrameData  # noqa: E402
from observation.base import FrameSource, SourceConfig  # noqa: E402


class MockFrameSource(FrameSource):
    """
    Frame source that hands out one prepared frame per current_frame() call
    and reports end of stream after the last one.
    """

    def __init__(self, frames=None, size=(320, 240), source_id="mock.mp4"):
        super().__init__(SourceConfig(source_id=source_id))
        width, height = size
        if frames is None:
            frames = [np.full((height, width, 3), 80, dtype=np.uint8) for _ in range(3)]
        self._frames = frames
        self._size = size
        self._pos = 0
        self.closed = False

    def open(self) -> None:
        self._is_open = True
        self._set_data_loaded(*self._size)

    def current_frame(self):
        if not self._is_open or not self._frames:
            return None
        index = min(self._pos, len(self._frames) - 1)
        self._pos += 1
        if self._pos >= len(self._frames):
            self._set_ended()
        return FrameData(frame=self._frames[index], frame_index=index, source=self.source_id)

    def close(self) -> None:
        self._is_open = False
        self._is_playing = False
        self.closed = True


class ScriptedDetector:
    """
    Detector returning one scripted result per detect() call.

    Script entries are lists of detections or exceptions to raise. After
    the script runs out, the last entry repeats.
    """

    def __init__(self, script=None, load_error=None):
        self.script = list(script or [[]])
        self.load_error = load_error
        self.load_calls = 0
        self.detect_calls = 0
        self.last_latency_s = None
        self.surfaces = []

    async def load(self):
        self.load_calls += 1
        if self.load_error is not None:
            raise ModelLoadError(str(self.load_error))
        return self

    async def detect(self, surface):
        await self.load()
        index = min(self.detect_calls, len(self.script) - 1)
        self.detect_calls += 1
        self.surfaces.append(surface.copy())
        await asyncio.sleep(0)
        entry = self.script[index]
        if isinstance(entry, Exception):
            raise entry
        return list(entry)


async def no_sleep(_delay):
    await asyncio.sleep(0)


def det(label, x, y, w, h, confidence=0.9):
    return Detection.from_xywh(label, x, y, w, h, confidence=confidence)


@pytest.fixture
def mock_source():
    return MockFrameSource()


@pytest.fixture
def sample_video(tmp_path):
    """Write a short MJPG clip: 10 frames, 64x48, 10 fps, brightness rising per frame."""
    import cv2

    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10.0, (64, 48))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG video")
    for i in range(10):
        writer.write(np.full((48, 64, 3), i * 20, dtype=np.uint8))
    writer.release()
    return str(path)


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
detection:
  model: "yolov8n.pt"
  conf_threshold: 0.5
  iou_threshold: 0.45

classification:
  child_area_threshold: 15000
  animal_labels: ["cat", "dog", "horse", "bird"]

loop:
  refresh_hz: 60

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "video": {"allowed_extensions": [".mp4", ".avi"]},
        "detection": {
            "model": "yolov8n.pt",
            "conf_threshold": 0.5,
            "iou_threshold": 0.45,
        },
        "classification": {
            "child_area_threshold": 15000,
            "animal_labels": ["cat", "dog", "horse", "bird"],
        },
        "loop": {"refresh_hz": 60, "stats_log_interval": 10.0},
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
