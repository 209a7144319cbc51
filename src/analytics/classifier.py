"""
Size-based classification of detections into counting buckets.

Rules, applied in order:
1. Animal labels (cat, dog, horse, bird by default) -> ANIMAL.
2. "person": display-box area below the child threshold -> CHILD,
   otherwise ADULT_PERSON. Area is measured in render-surface pixels, so a
   person far from the camera also reads as a child.
3. Anything else -> OTHER (drawn, never counted).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

from models.config import ClassificationConfig, DEFAULT_ANIMAL_LABELS, DEFAULT_CHILD_AREA_THRESHOLD
from models.counters import FrameCounters, ScaleFactors
from models.detection import CATEGORY_COLORS, Category, ClassifiedDetection, Detection

PERSON_LABEL = "person"


@dataclass(frozen=True)
class ClassifierRules:
    child_area_threshold: float = DEFAULT_CHILD_AREA_THRESHOLD
    animal_labels: FrozenSet[str] = field(default_factory=lambda: frozenset(DEFAULT_ANIMAL_LABELS))

    @classmethod
    def from_config(cls, cfg: ClassificationConfig) -> "ClassifierRules":
        return cls(
            child_area_threshold=float(cfg.child_area_threshold),
            animal_labels=frozenset(cfg.animal_labels),
        )


DEFAULT_RULES = ClassifierRules()


def categorize(class_label: str, display_area: float, rules: ClassifierRules = DEFAULT_RULES) -> Category:
    if class_label in rules.animal_labels:
        return Category.ANIMAL
    if class_label == PERSON_LABEL:
        if display_area < rules.child_area_threshold:
            return Category.CHILD
        return Category.ADULT_PERSON
    return Category.OTHER


def classify(
    detection: Detection,
    scale: ScaleFactors,
    rules: ClassifierRules = DEFAULT_RULES,
) -> ClassifiedDetection:
    """Map a source-space detection to its category, color and display box."""
    display_box = detection.bbox.scaled(scale)
    category = categorize(detection.class_label, display_box.area, rules)
    return ClassifiedDetection(
        detection=detection,
        category=category,
        color=CATEGORY_COLORS[category],
        display_box=display_box,
    )


def classify_all(
    detections: Iterable[Detection],
    scale: ScaleFactors,
    rules: ClassifierRules = DEFAULT_RULES,
) -> List[ClassifiedDetection]:
    return [classify(d, scale, rules) for d in detections]


def tally(classified: Iterable[ClassifiedDetection]) -> FrameCounters:
    """Count one frame's classified detections, starting from zero."""
    counters = FrameCounters.zero()
    for item in classified:
        counters = counters.incremented(item.category)
    return counters
