"""
Unit tests for detection.categorize module.
"""
import pytest
from core.models import Category, DetectedBox
from detection.categorize import (
    apply_spatial_categorization,
    build_category_rules,
    categorize_text,
    find_value_neighbor,
    match_key_trigger
)


def _box(label, x1, y1, x2, y2, category=Category.DEFAULT):
    return DetectedBox(label=label, box=(x1, y1, x2, y2), category=category)


class TestCategorizeText:
    """Tests for lexical categorization."""

    @pytest.mark.parametrize("text,expected", [
        ("john@example.com", Category.EMAIL),
        ("555-123-4567", Category.PHONE),
        ("(555) 123-4567", Category.PHONE),
        ("1-555-123-4567", Category.PHONE),
        ("+1 555 123 4567", Category.PHONE),
        ("+15551234567", Category.PHONE),
        ("5551234567", Category.PHONE),
        ("12/25/2024", Category.DATE),
        ("https://example.com/path", Category.LINK),
        ("WWW.Example.com", Category.LINK),
        ("4111 1111 1111 1111", Category.CREDIT_CARD),
        ("4111111111111111", Category.CREDIT_CARD),
        ("4222222222222", Category.CREDIT_CARD),
        ("42222222222222", Category.CREDIT_CARD),
        ("4111-1111-1111-1111", Category.CREDIT_CARD),
        ("$42.00", Category.PRICE),
        ("100 EUR", Category.PRICE),
        ("123 Main Street", Category.ADDRESS),
        ("Hello world", Category.DEFAULT),
        ("Total", Category.DEFAULT),
        ("", Category.DEFAULT),
    ])
    def test_categories(self, text, expected):
        assert categorize_text(text) is expected

    def test_first_match_wins(self):
        rules = [
            (lambda text: True, Category.PHONE),
            (lambda text: True, Category.EMAIL),
        ]
        assert categorize_text("anything", rules) is Category.PHONE

    def test_custom_patterns(self):
        rules = build_category_rules([('NAME', r'^Dr\. ', False)])

        assert categorize_text("Dr. Who", rules) is Category.NAME
        assert categorize_text("john@example.com", rules) is Category.DEFAULT


class TestMatchKeyTrigger:
    """Tests for field-key detection."""

    @pytest.mark.parametrize("label,expected", [
        ("Name", Category.NAME),
        ("name:", Category.NAME),
        ("Bill To", Category.NAME),
        ("Address", Category.ADDRESS),
        ("Total:", Category.PRICE),
        ("  amount  ", Category.PRICE),
        ("Named", None),
        ("Total due now", None),
    ])
    def test_triggers(self, label, expected):
        assert match_key_trigger(label) is expected


class TestFindValueNeighbor:
    """Tests for spatial neighbour search."""

    def test_right_neighbor(self):
        key = _box("Name", 0, 0, 50, 20)
        value = _box("John Smith", 60, 0, 160, 20)

        assert find_value_neighbor(key, [key, value]) is value

    def test_closest_right_wins(self):
        key = _box("Name", 0, 0, 50, 20)
        far = _box("far", 200, 0, 260, 20)
        near = _box("near", 60, 0, 120, 20)

        assert find_value_neighbor(key, [key, far, near]) is near

    def test_below_neighbor(self):
        key = _box("Address", 0, 0, 80, 20)
        value = _box("Springfield", 0, 30, 100, 50)

        assert find_value_neighbor(key, [key, value]) is value

    def test_right_preferred_over_below(self):
        key = _box("Name", 0, 0, 50, 20)
        below = _box("below", 0, 25, 50, 45)
        right = _box("right", 300, 0, 400, 20)

        assert find_value_neighbor(key, [key, below, right]) is right

    def test_too_far_below(self):
        key = _box("Address", 0, 0, 80, 20)
        value = _box("Springfield", 0, 120, 100, 140)

        assert find_value_neighbor(key, [key, value]) is None

    def test_below_needs_horizontal_overlap(self):
        key = _box("Address", 0, 0, 80, 20)
        value = _box("Springfield", 200, 30, 300, 50)

        assert find_value_neighbor(key, [key, value]) is None

    def test_left_side_ignored(self):
        key = _box("Name", 100, 0, 150, 20)
        value = _box("John", 0, 0, 60, 20)

        assert find_value_neighbor(key, [key, value]) is None

    def test_large_overlap_rejected(self):
        key = _box("Name", 0, 0, 100, 20)
        value = _box("John", 40, 0, 140, 20)

        assert find_value_neighbor(key, [key, value]) is None

    def test_small_overlap_allowed(self):
        key = _box("Name", 0, 0, 100, 20)
        value = _box("John", 80, 0, 180, 20)

        assert find_value_neighbor(key, [key, value]) is value

    def test_typed_boxes_skipped(self):
        key = _box("Total", 0, 0, 50, 20)
        value = _box("$42.00", 60, 0, 120, 20, Category.PRICE)

        assert find_value_neighbor(key, [key, value]) is None

    def test_custom_thresholds(self):
        key = _box("Address", 0, 0, 80, 20)
        value = _box("Springfield", 0, 120, 100, 140)

        assert find_value_neighbor(key, [key, value], below_ratio=6) is value


class TestApplySpatialCategorization:
    """Tests for key->value propagation."""

    def test_name_value(self):
        boxes = [
            _box("Name", 0, 0, 50, 20),
            _box("John Smith", 60, 0, 160, 20),
        ]

        apply_spatial_categorization(boxes)

        assert boxes[0].category is Category.DEFAULT
        assert boxes[1].category is Category.NAME

    def test_existing_category_kept(self):
        boxes = [
            _box("Total", 0, 0, 50, 20),
            _box("$42.00", 60, 0, 120, 20, Category.PRICE),
        ]

        apply_spatial_categorization(boxes)

        assert [box.category for box in boxes] == [Category.DEFAULT, Category.PRICE]

    def test_each_key_claims_one_value(self):
        boxes = [
            _box("Name", 0, 0, 50, 20),
            _box("John", 60, 0, 100, 20),
            _box("Smith", 110, 0, 160, 20),
        ]

        apply_spatial_categorization(boxes)

        assert [box.category for box in boxes] == [
            Category.DEFAULT, Category.NAME, Category.DEFAULT
        ]

    def test_second_key_skips_claimed_value(self):
        """A value typed by an earlier key is no longer a candidate."""
        boxes = [
            _box("Name", 0, 0, 50, 20),
            _box("Customer", 0, 30, 80, 50),
            _box("Jane", 60, 0, 100, 20),
        ]

        apply_spatial_categorization(boxes)

        assert boxes[2].category is Category.NAME
        assert boxes[1].category is Category.DEFAULT

    def test_returns_same_list(self):
        boxes = [_box("x", 0, 0, 1, 1)]
        assert apply_spatial_categorization(boxes) is boxes
