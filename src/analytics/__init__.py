"""
Analytics: turning raw detections into counted categories.
"""

from .classifier import (
    ClassifierRules,
    DEFAULT_RULES,
    categorize,
    classify,
    classify_all,
    tally,
)

__all__ = [
    "ClassifierRules",
    "DEFAULT_RULES",
    "categorize",
    "classify",
    "classify_all",
    "tally",
]
