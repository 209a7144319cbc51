"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_VIDEO_EXTENSIONS = [".mp4", ".avi", ".mov", ".mkv", ".webm", ".m4v"]
DEFAULT_ANIMAL_LABELS = ["cat", "dog", "horse", "bird"]
DEFAULT_CHILD_AREA_THRESHOLD = 15000.0


@dataclass
class VideoConfig:
    """Accepted video inputs."""
    allowed_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "VideoConfig":
        return cls(
            allowed_extensions=[
                ext.lower() for ext in d.get("allowed_extensions", DEFAULT_VIDEO_EXTENSIONS)
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"allowed_extensions": self.allowed_extensions}


@dataclass
class DetectionConfig:
    """YOLO detector configuration."""
    model: str = "yolov8n.pt"
    conf_threshold: float = 0.5
    iou_threshold: float = 0.45
    device: Optional[str] = None
    class_name_overrides: Optional[Dict[int, str]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            model=d.get("model", "yolov8n.pt"),
            conf_threshold=float(d.get("conf_threshold", 0.5)),
            iou_threshold=float(d.get("iou_threshold", 0.45)),
            device=d.get("device"),
            class_name_overrides=d.get("class_name_overrides"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "model": self.model,
            "conf_threshold": self.conf_threshold,
            "iou_threshold": self.iou_threshold,
        }
        if self.device is not None:
            d["device"] = self.device
        if self.class_name_overrides is not None:
            d["class_name_overrides"] = self.class_name_overrides
        return d


@dataclass
class ClassificationConfig:
    """Bucketing rules for detections."""
    child_area_threshold: float = DEFAULT_CHILD_AREA_THRESHOLD
    animal_labels: List[str] = field(default_factory=lambda: list(DEFAULT_ANIMAL_LABELS))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ClassificationConfig":
        return cls(
            child_area_threshold=float(d.get("child_area_threshold", DEFAULT_CHILD_AREA_THRESHOLD)),
            animal_labels=list(d.get("animal_labels", DEFAULT_ANIMAL_LABELS)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "child_area_threshold": self.child_area_threshold,
            "animal_labels": self.animal_labels,
        }


@dataclass
class LoopConfig:
    """Detection loop scheduling."""
    refresh_hz: float = 60.0
    stats_log_interval: float = 10.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LoopConfig":
        return cls(
            refresh_hz=float(d.get("refresh_hz", 60.0)),
            stats_log_interval=float(d.get("stats_log_interval", 10.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "refresh_hz": self.refresh_hz,
            "stats_log_interval": self.stats_log_interval,
        }


@dataclass
class DisplayConfig:
    """Preview window settings."""
    enabled: bool = False
    window_name: str = "Video Headcount"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DisplayConfig":
        return cls(
            enabled=bool(d.get("enabled", False)),
            window_name=d.get("window_name", "Video Headcount"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "window_name": self.window_name}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    video: VideoConfig = field(default_factory=VideoConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    log_path: str = "logs/video_headcount.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            video=VideoConfig.from_dict(d.get("video") or {}),
            detection=DetectionConfig.from_dict(d.get("detection") or {}),
            classification=ClassificationConfig.from_dict(d.get("classification") or {}),
            loop=LoopConfig.from_dict(d.get("loop") or {}),
            display=DisplayConfig.from_dict(d.get("display") or {}),
            log_path=d.get("log_path", "logs/video_headcount.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary."""
        return {
            "video": self.video.to_dict(),
            "detection": self.detection.to_dict(),
            "classification": self.classification.to_dict(),
            "loop": self.loop.to_dict(),
            "display": self.display.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
