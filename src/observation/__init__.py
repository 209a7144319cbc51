"""
Observation layer: playable frame sources.

A frame source abstracts where decoded frames come from (a video file
today) away from the detection loop. Each source implements the
FrameSource interface and returns FrameData objects.
"""

from .base import FrameSource, SourceConfig
from .video_file import VideoFileSource, VideoFileSourceConfig

__all__ = [
    "FrameSource",
    "SourceConfig",
    "VideoFileSource",
    "VideoFileSourceConfig",
]
