"""
Runtime wiring: session lifecycle and the services of one run.
"""

from .session import SessionController, SessionState, validate_video_path
from .context import RuntimeContext, build_runtime

__all__ = [
    "SessionController",
    "SessionState",
    "validate_video_path",
    "RuntimeContext",
    "build_runtime",
]
