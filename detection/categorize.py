"""
PII Categorization Module

Two passes over detected text boxes:
1. Lexical: each label is tested against an ordered rule list, first
   match wins, no match gives DEFAULT.
2. Spatial key->value: labels such as "Name" or "Total" are field keys.
   The nearest untyped box to the right of a key (same line), or failing
   that below it, inherits the key's category.
"""
import re
from typing import Callable, List, Optional, Sequence, Tuple

from core.constants import CATEGORY_PATTERNS, KEY_VALUE_TRIGGERS, SPATIAL_THRESHOLDS
from core.models import Category, DetectedBox
from utils.geometry import horizontal_overlap

Predicate = Callable[[str], bool]


def _regex_predicate(pattern: str, lowercase: bool = False) -> Predicate:
    compiled = re.compile(pattern)
    if lowercase:
        return lambda text: compiled.search(text.lower().strip()) is not None
    return lambda text: compiled.search(text) is not None


def build_category_rules(
    patterns: Sequence[Tuple[str, str, bool]] = CATEGORY_PATTERNS
) -> List[Tuple[Predicate, Category]]:
    """
    Compile (category, pattern, lowercase) entries into ordered rules.

    Returns:
        List of (predicate, category) pairs, in evaluation order
    """
    return [
        (_regex_predicate(pattern, lowercase), Category(name))
        for name, pattern, lowercase in patterns
    ]


def build_key_triggers(
    triggers: Sequence[Tuple[str, str]] = KEY_VALUE_TRIGGERS
) -> List[Tuple[re.Pattern, Category]]:
    """Compile key-label patterns (case-insensitive, whole label)."""
    return [
        (re.compile(pattern, re.IGNORECASE), Category(name))
        for name, pattern in triggers
    ]


CATEGORY_RULES = build_category_rules()
KEY_TRIGGERS = build_key_triggers()


def categorize_text(
    text: str,
    rules: Sequence[Tuple[Predicate, Category]] = CATEGORY_RULES
) -> Category:
    """
    Classify a text label into a PII category.

    Args:
        text: Recognized text
        rules: Ordered (predicate, category) pairs

    Returns:
        First matching category, or Category.DEFAULT
    """
    for predicate, category in rules:
        if predicate(text):
            return category
    return Category.DEFAULT


def match_key_trigger(
    label: str,
    triggers: Sequence[Tuple[re.Pattern, Category]] = KEY_TRIGGERS
) -> Optional[Category]:
    """Return the category a field-key label assigns, if any."""
    label = label.strip()
    for pattern, category in triggers:
        if pattern.match(label):
            return category
    return None


def find_value_neighbor(
    key: DetectedBox,
    boxes: Sequence[DetectedBox],
    same_line_ratio: float = SPATIAL_THRESHOLDS['same_line_ratio'],
    below_ratio: float = SPATIAL_THRESHOLDS['below_ratio'],
    max_overlap: float = SPATIAL_THRESHOLDS['max_overlap']
) -> Optional[DetectedBox]:
    """
    Find the untyped box that holds the value for a field key.

    Same-line candidates to the right are preferred, smallest gap first.
    Otherwise the closest box below whose x-span overlaps the key, within
    ``below_ratio`` key heights. Ties keep the earliest box in ``boxes``.

    Args:
        key: The field-key box
        boxes: All detected boxes
        same_line_ratio: Max center offset as a fraction of key height
        below_ratio: Max vertical gap as a multiple of key height
        max_overlap: Horizontal overlap tolerated for right neighbours

    Returns:
        The neighbour, or None
    """
    kx1, ky1, kx2, ky2 = key.box
    key_height = ky2 - ky1
    key_center_y = key.center_y

    candidates = [
        box for box in boxes
        if box is not key and box.category is Category.DEFAULT
    ]

    best = None
    min_distance = float('inf')

    for candidate in candidates:
        cx1 = candidate.box[0]
        same_line = abs(key_center_y - candidate.center_y) < key_height * same_line_ratio
        to_right = cx1 > kx1
        if not (same_line and to_right):
            continue

        distance = cx1 - kx2
        if distance > -max_overlap and distance < min_distance:
            min_distance = distance
            best = candidate

    if best is not None:
        return best

    for candidate in candidates:
        cy1 = candidate.box[1]
        below = cy1 > ky1
        aligned = horizontal_overlap(key.box, candidate.box) > 0
        if not (below and aligned):
            continue

        distance = cy1 - ky2
        if distance < key_height * below_ratio and distance < min_distance:
            min_distance = distance
            best = candidate

    return best


def apply_spatial_categorization(
    boxes: List[DetectedBox],
    triggers: Sequence[Tuple[re.Pattern, Category]] = KEY_TRIGGERS,
    **thresholds
) -> List[DetectedBox]:
    """
    Propagate field-key categories onto neighbouring value boxes.

    Keys are visited in list order. Each key claims at most one
    neighbour, chosen before any category is overwritten. Boxes that
    are already typed are never reconsidered.

    Args:
        boxes: Lexically categorized boxes (modified in place)
        triggers: Compiled key patterns
        **thresholds: same_line_ratio, below_ratio, max_overlap

    Returns:
        The same list
    """
    for key in boxes:
        category = match_key_trigger(key.label, triggers)
        if category is None:
            continue

        neighbor = find_value_neighbor(key, boxes, **thresholds)
        if neighbor is not None:
            neighbor.category = category

    return boxes
