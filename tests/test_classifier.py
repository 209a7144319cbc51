"""
Tests for the size-based detection classifier.
"""

import pytest

from analytics.classifier import ClassifierRules, categorize, classify, classify_all, tally
from models.config import ClassificationConfig
from models.counters import FrameCounters, ScaleFactors
from models.detection import CATEGORY_COLORS, Category

from conftest import det

UNIT = ScaleFactors(1.0, 1.0)


class TestAnimals:
    @pytest.mark.parametrize("label", ["cat", "dog", "horse", "bird"])
    def test_animal_labels_are_animals_at_any_size(self, label):
        for w, h in [(1, 1), (100, 100), (1000, 1000)]:
            result = classify(det(label, 0, 0, w, h), UNIT)
            assert result.category == Category.ANIMAL
            assert result.color == CATEGORY_COLORS[Category.ANIMAL]

    def test_each_animal_counts_once(self):
        classified = classify_all([det("dog", 0, 0, 5, 5), det("bird", 0, 0, 500, 500)], UNIT)
        assert tally(classified) == FrameCounters(adult_count=0, child_count=0, animal_count=2)


class TestPeople:
    def test_small_person_is_child(self):
        result = classify(det("person", 0, 0, 100, 100), UNIT)
        assert result.display_box.area == 10000
        assert result.category == Category.CHILD
        assert result.color == (0, 0, 255, 255)

    def test_large_person_is_adult(self):
        result = classify(det("person", 0, 0, 200, 200), UNIT)
        assert result.category == Category.ADULT_PERSON
        assert result.color == (0, 255, 0, 255)

    def test_threshold_exactly_is_adult(self):
        result = classify(det("person", 0, 0, 150, 100), UNIT)
        assert result.display_box.area == 15000
        assert result.category == Category.ADULT_PERSON

    def test_just_below_threshold_is_child(self):
        result = classify(det("person", 0, 0, 149.99, 100), UNIT)
        assert result.category == Category.CHILD

    def test_area_uses_display_scale(self):
        # 100x100 source box is a child at scale 1 but an adult at scale 2
        result = classify(det("person", 10, 20, 100, 100), ScaleFactors(2.0, 2.0))
        assert result.display_box.as_tuple() == (20.0, 40.0, 200.0, 200.0)
        assert result.category == Category.ADULT_PERSON

    def test_anisotropic_scale(self):
        result = classify(det("person", 0, 0, 100, 100), ScaleFactors(3.0, 0.5))
        assert result.display_box.area == pytest.approx(15000)
        assert result.category == Category.ADULT_PERSON


class TestOther:
    def test_unknown_label_is_other_and_not_counted(self):
        result = classify(det("car", 0, 0, 300, 300), UNIT)
        assert result.category == Category.OTHER
        assert result.color == (255, 255, 0, 255)
        assert tally([result]) == FrameCounters.zero()

    def test_label_match_is_exact(self):
        assert categorize("Person", 40000) == Category.OTHER
        assert categorize("dogs", 10) == Category.OTHER


class TestLabel:
    def test_label_shows_scaled_top_left_with_two_decimals(self):
        result = classify(det("dog", 10, 20, 30, 40), ScaleFactors(0.5, 0.25))
        assert result.label == "dog (5.00, 5.00)"

    def test_label_rounds(self):
        result = classify(det("person", 1.234, 5.678, 10, 10), UNIT)
        assert result.label == "person (1.23, 5.68)"


class TestTally:
    def test_mixed_frame(self):
        classified = classify_all(
            [det("dog", 0, 0, 10, 10), det("cat", 0, 0, 10, 10), det("person", 0, 0, 200, 200)],
            UNIT,
        )
        assert tally(classified) == FrameCounters(adult_count=1, child_count=0, animal_count=2)

    def test_tally_matches_category_multiset(self):
        detections = [
            det("person", 0, 0, 10, 10),
            det("person", 0, 0, 10, 10),
            det("person", 0, 0, 500, 500),
            det("horse", 0, 0, 50, 50),
            det("chair", 0, 0, 50, 50),
        ]
        classified = classify_all(detections, UNIT)
        counters = tally(classified)
        categories = [c.category for c in classified]
        assert counters.child_count == categories.count(Category.CHILD) == 2
        assert counters.adult_count == categories.count(Category.ADULT_PERSON) == 1
        assert counters.animal_count == categories.count(Category.ANIMAL) == 1
        assert counters.total == 4

    def test_empty_frame(self):
        assert tally([]) == FrameCounters.zero()


class TestRulesFromConfig:
    def test_custom_threshold_and_labels(self):
        rules = ClassifierRules.from_config(
            ClassificationConfig(child_area_threshold=5000, animal_labels=["sheep"])
        )
        assert classify(det("person", 0, 0, 80, 80), UNIT, rules).category == Category.ADULT_PERSON
        assert classify(det("sheep", 0, 0, 80, 80), UNIT, rules).category == Category.ANIMAL
        assert classify(det("dog", 0, 0, 80, 80), UNIT, rules).category == Category.OTHER
