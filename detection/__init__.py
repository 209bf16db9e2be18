"""Detection package - Model output normalization and PII categorization."""

from .categorize import (
    CATEGORY_RULES,
    KEY_TRIGGERS,
    build_category_rules,
    build_key_triggers,
    categorize_text,
    match_key_trigger,
    find_value_neighbor,
    apply_spatial_categorization
)
from .pipeline import DetectionPipeline, normalize_regions

__all__ = [
    'CATEGORY_RULES',
    'KEY_TRIGGERS',
    'build_category_rules',
    'build_key_triggers',
    'categorize_text',
    'match_key_trigger',
    'find_value_neighbor',
    'apply_spatial_categorization',
    'DetectionPipeline',
    'normalize_regions'
]
