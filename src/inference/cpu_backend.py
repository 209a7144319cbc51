"""
Ultralytics YOLO detector backend.

Runs a pretrained COCO checkpoint (yolov8n.pt by default) on CPU or,
when configured, on a CUDA/MPS device. COCO labels line up with the
classifier's "person" / animal label set.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import cv2
import numpy as np
from ultralytics import YOLO

from models.config import DetectionConfig
from models.detection import BoundingBox, Detection
from .backend import LazyDetector


class UltralyticsModel:
    """ModelHandle wrapping a loaded YOLO model."""

    def __init__(self, model, cfg: DetectionConfig):
        self._model = model
        self.cfg = cfg

    def predict(self, image: np.ndarray) -> List[Detection]:
        # The render surface is RGBA; Ultralytics expects BGR numpy input
        if image.ndim == 3 and image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_RGBA2BGR)

        results = self._model.predict(
            source=image,
            conf=self.cfg.conf_threshold,
            iou=self.cfg.iou_threshold,
            device=self.cfg.device,
            verbose=False,
        )
        if not results:
            return []

        r0 = results[0]
        names: Dict[int, str] = getattr(r0, "names", None) or {}
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return []

        xyxy = boxes.xyxy.cpu().numpy() if hasattr(boxes.xyxy, "cpu") else np.asarray(boxes.xyxy)
        conf = boxes.conf.cpu().numpy() if hasattr(boxes.conf, "cpu") else np.asarray(boxes.conf)
        cls = boxes.cls.cpu().numpy() if hasattr(boxes.cls, "cpu") else np.asarray(boxes.cls)

        out: List[Detection] = []
        for (x1, y1, x2, y2), c, k in zip(xyxy, conf, cls):
            class_id = int(k)
            out.append(
                Detection(
                    class_label=self._label_for(class_id, names),
                    bbox=BoundingBox.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
                    confidence=float(c),
                    class_id=class_id,
                )
            )
        return out

    def _label_for(self, class_id: int, names: Dict[int, str]) -> str:
        overrides: Optional[Dict[int, str]] = self.cfg.class_name_overrides
        return (overrides or {}).get(class_id) or names.get(class_id) or str(class_id)


class UltralyticsDetector(LazyDetector):
    """Detector backed by an Ultralytics YOLO checkpoint."""

    def __init__(self, cfg: DetectionConfig):
        super().__init__()
        self.cfg = cfg
        self.name = f"YOLO model {cfg.model}"

    def _load_model(self) -> UltralyticsModel:
        return UltralyticsModel(YOLO(self.cfg.model), self.cfg)
