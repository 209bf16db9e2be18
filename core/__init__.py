"""Core package - Domain models and constants."""

from .models import (
    Category,
    Box,
    BoxGeometry,
    RawRegion,
    DetectedBox,
    PresetRecord,
    generate_box_id,
    parse_category
)
from .constants import (
    EDITOR_CONSTANTS,
    CATEGORY_LABELS,
    CATEGORY_PATTERNS,
    KEY_VALUE_TRIGGERS,
    SPATIAL_THRESHOLDS,
    OCR_PROMPTS,
    DEFAULT_INFERENCE_PARAMS,
    GROUNDING_PATTERN
)

__all__ = [
    'Category',
    'Box',
    'BoxGeometry',
    'RawRegion',
    'DetectedBox',
    'PresetRecord',
    'generate_box_id',
    'parse_category',
    'EDITOR_CONSTANTS',
    'CATEGORY_LABELS',
    'CATEGORY_PATTERNS',
    'KEY_VALUE_TRIGGERS',
    'SPATIAL_THRESHOLDS',
    'OCR_PROMPTS',
    'DEFAULT_INFERENCE_PARAMS',
    'GROUNDING_PATTERN'
]
