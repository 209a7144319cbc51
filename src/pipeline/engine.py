"""
Detection loop for the video headcount system.

Drives, once per display refresh while a video plays:
    frame source -> render surface -> grayscale -> detector -> classify/draw -> publish

State machine:
    IDLE --attach--> AWAITING_DATA --data loaded--> READY --play--> RUNNING
    RUNNING --pause/end--> READY
    RUNNING --model load fails--> FAILED
    any --detach--> IDLE

Every attach/detach bumps a generation token. A tick remembers the token it
started with and drops its result if the token changed while it was waiting
on the detector. A new run waits for a detached run to finish first, so
at most one detection pass is ever in flight.

Any failure inside a tick stays local to that frame: zero counters are
published and the loop keeps ticking.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from analytics.classifier import DEFAULT_RULES, ClassifierRules, classify_all, tally
from models.config import LoopConfig
from models.counters import FrameCounters, ScaleFactors
from models.detection import ClassifiedDetection
from models.errors import DetectionTickError, ModelLoadError
from models.frame import FrameData
from observation.base import FrameSource
from inference.backend import Detector
from pipeline.clock import RefreshClock
from rendering.grayscale import to_grayscale
from rendering.overlay import draw_all
from rendering.surface import RenderSurface


class LoopState(str, Enum):
    IDLE = "idle"
    AWAITING_DATA = "awaiting_data"
    READY = "ready"
    RUNNING = "running"
    FAILED = "failed"


@dataclass
class LoopStats:
    """Runtime statistics for the loop."""
    tick_count: int = 0
    detection_failures: int = 0
    discarded_results: int = 0
    last_latency_s: Optional[float] = None
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)


TickCallback = Callable[[FrameData, FrameCounters], None]
ErrorCallback = Callable[[Exception], None]


class DetectionLoop:
    """
    Per-frame detection and classification scheduler.

    Example:
        loop = DetectionLoop(detector, RenderSurface())
        loop.add_callback(lambda frame_data, counters: print(counters))
        loop.attach(source)
        source.open()   # data loaded -> READY
        source.play()   # play -> RUNNING (needs a running event loop)
    """

    def __init__(
        self,
        detector: Detector,
        surface: RenderSurface,
        rules: ClassifierRules = DEFAULT_RULES,
        clock: Optional[RefreshClock] = None,
        config: Optional[LoopConfig] = None,
    ):
        self.detector = detector
        self.surface = surface
        self.rules = rules
        self.config = config or LoopConfig()
        self.clock = clock or RefreshClock(self.config.refresh_hz)
        self.state = LoopState.IDLE
        self.generation = 0
        self.error: Optional[ModelLoadError] = None
        self.counters = FrameCounters.zero()
        self.last_classified: List[ClassifiedDetection] = []
        self.stats = LoopStats()
        self._source: Optional[FrameSource] = None
        self._scale: Optional[ScaleFactors] = None
        self._task: Optional[asyncio.Task] = None
        # Task of a detached source that may still be waiting on the detector
        self._draining: Optional[asyncio.Task] = None
        self._callbacks: List[TickCallback] = []
        self._error_callbacks: List[ErrorCallback] = []

    @property
    def source(self) -> Optional[FrameSource]:
        return self._source

    @property
    def scale(self) -> Optional[ScaleFactors]:
        return self._scale

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def add_callback(self, callback: TickCallback) -> None:
        """
        Add a callback invoked after each tick publishes its counters.

        Args:
            callback: Function taking (frame_data, counters).
        """
        self._callbacks.append(callback)

    def add_error_callback(self, callback: ErrorCallback) -> None:
        """Add a callback invoked once when the detector fails to load."""
        self._error_callbacks.append(callback)

    def attach(self, source: FrameSource) -> None:
        """Bind a frame source: IDLE -> AWAITING_DATA."""
        if self.state != LoopState.IDLE:
            raise RuntimeError(f"Cannot attach a source while {self.state.value}")
        self.generation += 1
        generation = self.generation
        self._source = source
        self.state = LoopState.AWAITING_DATA
        self.stats = LoopStats()
        logging.info(f"Detection loop attached to {source.source_id} (generation {generation})")

        source.on_data_loaded(lambda w, h: self._handle_data_loaded(generation, w, h))
        source.on_play(lambda: self._handle_play(generation))

    def detach(self) -> None:
        """Stop scheduling, drop in-flight results, release the surface: any -> IDLE."""
        if self.state == LoopState.IDLE:
            return
        self.generation += 1
        source_id = self._source.source_id if self._source else None
        self._source = None
        self._scale = None
        if self._task is not None and not self._task.done():
            self._draining = self._task
        self._task = None
        self.surface.detach()
        self.counters = FrameCounters.zero()
        self.last_classified = []
        self.error = None
        self.state = LoopState.IDLE
        logging.info(f"Detection loop detached from {source_id}")

    def _handle_data_loaded(self, generation: int, width: int, height: int) -> None:
        if generation != self.generation or self.state != LoopState.AWAITING_DATA:
            return
        self.surface.configure(width, height)
        self._scale = ScaleFactors.between(self.surface.size, (width, height))
        self.state = LoopState.READY
        logging.info(f"Render surface sized to {width}x{height}, scale={self._scale}")

    def _handle_play(self, generation: int) -> None:
        if generation != self.generation:
            return
        self.start()

    def start(self) -> Optional[asyncio.Task]:
        """
        Start ticking: READY -> RUNNING.

        Must be called from inside a running event loop. Returns the loop
        task, or None when the loop is not in a startable state.
        """
        if self._task is not None and not self._task.done():
            return self._task
        if self.state != LoopState.READY:
            if self.state == LoopState.FAILED:
                logging.debug("Detection loop is in failed state; not restarting")
            else:
                logging.warning(f"Cannot start detection loop while {self.state.value}")
            return None
        self.state = LoopState.RUNNING
        self._task = asyncio.get_running_loop().create_task(
            self._run(self.generation), name=f"detection-loop-{self.generation}"
        )
        return self._task

    async def run(self) -> None:
        """Start the loop and wait until it stops."""
        task = self.start()
        if task is not None:
            await task

    def _is_current(self, generation: int) -> bool:
        return generation == self.generation and self.state == LoopState.RUNNING

    async def _run(self, generation: int) -> None:
        try:
            await self._drain_previous()
            try:
                await self.detector.load()
            except ModelLoadError as e:
                if generation == self.generation:
                    self._fail(e)
                return

            logging.info("Detection loop running")
            while self._is_current(generation) and self._source is not None and self._source.is_playing:
                try:
                    await self.tick(generation)
                except Exception as e:
                    # Frame acquisition failed; nothing to publish for this refresh
                    self.stats.detection_failures += 1
                    logging.error(f"Tick failed before a frame was drawn: {e}")
                self._handle_periodic_tasks()
                if not self._is_current(generation):
                    break
                await self.clock.next_refresh()
        finally:
            if self._is_current(generation):
                self.state = LoopState.READY
                logging.info(
                    f"Detection loop paused after {self.stats.tick_count} ticks, counters={self.counters.as_dict()}"
                )

    async def _drain_previous(self) -> None:
        """Wait for a detached source's task so only one detection is ever in flight."""
        previous = self._draining
        self._draining = None
        if previous is not None and not previous.done():
            logging.debug("Waiting for the previous video's detection pass to finish")
            await asyncio.wait([previous])

    def _fail(self, error: ModelLoadError) -> None:
        self.state = LoopState.FAILED
        self.error = error
        self.counters = FrameCounters.zero()
        logging.error(f"Detection loop stopped: {error}")
        for callback in self._error_callbacks:
            try:
                callback(error)
            except Exception as e:
                logging.warning(f"Error callback failed: {e}")

    async def tick(self, generation: Optional[int] = None) -> Optional[FrameCounters]:
        """
        Run one draw -> grayscale -> detect -> annotate pass.

        Returns the published counters, or None when nothing was published
        (no frame available, or the result went stale while detecting).
        """
        if generation is None:
            generation = self.generation
        source = self._source
        if source is None or not self.surface.is_sized:
            return None

        frame_data = source.current_frame()
        if frame_data is None:
            return None

        try:
            self.surface.clear()
            self.surface.draw_frame(frame_data.frame)
            to_grayscale(self.surface.pixels)

            detections = await self.detector.detect(self.surface.pixels)

            if generation != self.generation or not self.surface.is_sized:
                self.stats.discarded_results += 1
                logging.debug(f"Discarded stale detection result for generation {generation}")
                return None

            classified = classify_all(detections, self._scale or ScaleFactors(), self.rules)
            draw_all(self.surface, classified)
        except Exception as e:
            if generation != self.generation:
                self.stats.discarded_results += 1
                return None
            self.stats.detection_failures += 1
            if isinstance(e, DetectionTickError):
                logging.warning(f"Detection failed on frame {frame_data.frame_index}: {e}")
            else:
                logging.error(f"Tick failed on frame {frame_data.frame_index}: {type(e).__name__}: {e}")
            self.last_classified = []
            return self._publish(frame_data, FrameCounters.zero())

        self.stats.last_latency_s = getattr(self.detector, "last_latency_s", None)
        self.last_classified = classified
        return self._publish(frame_data, tally(classified))

    def _publish(self, frame_data: FrameData, counters: FrameCounters) -> FrameCounters:
        self.counters = counters
        self.stats.tick_count += 1
        for callback in self._callbacks:
            try:
                callback(frame_data, counters)
            except Exception as e:
                logging.warning(f"Callback error: {e}")
        return counters

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            latency = self.stats.last_latency_s
            logging.info(
                f"Loop stats: ticks={self.stats.tick_count}, "
                f"failures={self.stats.detection_failures}, "
                f"discarded={self.stats.discarded_results}, "
                f"latency_ms={latency * 1000 if latency is not None else None}, "
                f"counters={self.counters.as_dict()}"
            )
            self.stats.last_stats_log_time = now
