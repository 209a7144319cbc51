"""
Error taxonomy for the detection pipeline.
"""


class InvalidMediaError(ValueError):
    """The selected input is not a playable video."""


class ModelLoadError(RuntimeError):
    """The detector model could not be initialized."""


class DetectionTickError(RuntimeError):
    """A single detect call failed; recovered by the loop."""
