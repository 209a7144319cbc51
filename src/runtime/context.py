from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from analytics.classifier import ClassifierRules
from display.state import CounterBoard
from display.window import PreviewWindow
from inference.backend import Detector
from models.config import Config
from pipeline.clock import RefreshClock
from pipeline.engine import DetectionLoop
from rendering.surface import RenderSurface
from runtime.session import SessionController


@dataclass
class RuntimeContext:
    """Holds the wired-up services for one run; avoids global singletons."""

    config: Config
    detector: Detector
    surface: RenderSurface
    loop: DetectionLoop
    session: SessionController
    board: CounterBoard
    window: Optional[PreviewWindow] = None


def build_runtime(
    config: Config,
    detector: Optional[Detector] = None,
    display: bool = False,
) -> RuntimeContext:
    """
    Wire detector, surface, loop, session and display from config.

    Args:
        config: Typed application config.
        detector: Detector override; defaults to the Ultralytics backend.
        display: Open the OpenCV preview window.
    """
    if detector is None:
        # Deferred: importing ultralytics is slow and not needed by callers
        # that bring their own detector.
        from inference.cpu_backend import UltralyticsDetector

        detector = UltralyticsDetector(config.detection)

    surface = RenderSurface()
    loop = DetectionLoop(
        detector,
        surface,
        rules=ClassifierRules.from_config(config.classification),
        clock=RefreshClock(config.loop.refresh_hz),
        config=config.loop,
    )
    session = SessionController(loop, video_cfg=config.video)
    board = CounterBoard()
    session.add_display(board)

    window = None
    if display:
        window = PreviewWindow(config.display.window_name)

    return RuntimeContext(
        config=config,
        detector=detector,
        surface=surface,
        loop=loop,
        session=session,
        board=board,
        window=window,
    )
