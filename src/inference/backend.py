"""
Detector capability interface.

Detectors load their model lazily and once, then return pixel-space
detections in the coordinate system of the surface they were given.
Both calls are coroutines: the blocking model work runs off the event
loop so a slow inference only delays the next tick.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Protocol

import numpy as np

from models.detection import Detection
from models.errors import DetectionTickError, ModelLoadError


class ModelHandle(Protocol):
    def predict(self, image: np.ndarray) -> List[Detection]:
        ...


class Detector(Protocol):
    async def load(self) -> ModelHandle:
        ...

    async def detect(self, surface: np.ndarray) -> List[Detection]:
        ...


class LazyDetector:
    """
    Base class implementing memoized loading and error translation.

    Subclasses implement _load_model() (blocking, returns a ModelHandle).
    A failed load is remembered: later calls re-raise the same
    ModelLoadError instead of retrying.
    """

    name = "detector"

    def __init__(self):
        self._model: Optional[ModelHandle] = None
        self._load_error: Optional[ModelLoadError] = None
        self._lock = asyncio.Lock()
        self.last_latency_s: Optional[float] = None

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def _load_model(self) -> ModelHandle:
        raise NotImplementedError

    async def load(self) -> ModelHandle:
        if self._model is not None:
            return self._model
        if self._load_error is not None:
            raise self._load_error
        async with self._lock:
            if self._model is not None:
                return self._model
            if self._load_error is not None:
                raise self._load_error
            started = time.perf_counter()
            try:
                self._model = await asyncio.to_thread(self._load_model)
            except Exception as e:
                self._load_error = ModelLoadError(f"Failed to load {self.name}: {e}")
                raise self._load_error from e
            logging.info(f"{self.name} loaded in {time.perf_counter() - started:.2f}s")
            return self._model

    async def detect(self, surface: np.ndarray) -> List[Detection]:
        model = await self.load()
        started = time.perf_counter()
        try:
            detections = await asyncio.to_thread(model.predict, surface)
        except Exception as e:
            raise DetectionTickError(f"{self.name} detect failed: {e}") from e
        self.last_latency_s = time.perf_counter() - started
        return detections

