"""
Per-frame counter and scale factor value types.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Tuple


@dataclass(frozen=True)
class ScaleFactors:
    """Ratio between render-surface pixels and frame-source pixels."""
    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def between(cls, surface_size: Tuple[int, int], native_size: Tuple[int, int]) -> "ScaleFactors":
        """
        Compute (surfaceW / nativeW, surfaceH / nativeH).

        Args:
            surface_size: Render surface (width, height).
            native_size: Frame source native (width, height).
        """
        native_w, native_h = native_size
        if native_w <= 0 or native_h <= 0:
            raise ValueError(f"Native size must be positive, got {native_size}")
        surface_w, surface_h = surface_size
        return cls(scale_x=surface_w / native_w, scale_y=surface_h / native_h)


@dataclass(frozen=True)
class FrameCounters:
    """
    Counts for a single processed frame.

    Rebuilt from zero on every tick; never accumulated across frames.
    """
    adult_count: int = 0
    child_count: int = 0
    animal_count: int = 0

    @classmethod
    def zero(cls) -> "FrameCounters":
        return cls()

    def incremented(self, category) -> "FrameCounters":
        """Return a copy with the counter for `category` bumped by one."""
        # Local import keeps models.detection -> models.counters one-directional
        from .detection import Category

        if category == Category.ANIMAL:
            return replace(self, animal_count=self.animal_count + 1)
        if category == Category.CHILD:
            return replace(self, child_count=self.child_count + 1)
        if category == Category.ADULT_PERSON:
            return replace(self, adult_count=self.adult_count + 1)
        return self

    @property
    def total(self) -> int:
        return self.adult_count + self.child_count + self.animal_count

    def as_dict(self) -> Dict[str, int]:
        return {
            "adult_count": self.adult_count,
            "child_count": self.child_count,
            "animal_count": self.animal_count,
        }
