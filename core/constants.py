"""
Constants and configuration values for the redaction editor.
"""

# Editor behaviour
EDITOR_CONSTANTS = {
    'zoom_step': 0.1,
    'max_zoom': 3.0,
    'min_zoom': 0.1,
    'pixelation_factor': 0.04,  # 1/25th of resolution
    'editor_padding': 96,
    'min_editor_dimension': 50,
    'duplicate_offset': 20,
    'min_box_size': 5,
}

# Arrow-key nudge distances (image-space units)
NUDGE_STEP = 1
NUDGE_STEP_LARGE = 10

# Resize handle hit radius in screen pixels
HANDLE_RADIUS = 6

# Corner handles, named by compass direction
RESIZE_HANDLES = ('nw', 'ne', 'sw', 'se')

# PII categories in display order
CATEGORY_LABELS = {
    'EMAIL': 'Emails',
    'PHONE': 'Phone Numbers',
    'CREDIT_CARD': 'Credit Cards',
    'DATE': 'Dates',
    'LINK': 'Links & URLs',
    'NAME': 'Names',
    'ADDRESS': 'Addresses',
    'PRICE': 'Prices',
    'DEFAULT': 'Other Text'
}

# Lexical categorization, evaluated in order, first match wins.
# Each entry: (category, pattern, match against lowercased text)
# A phone country code needs a '+' or a separator, so bare 11-16 digit runs
# are not phones.
CATEGORY_PATTERNS = [
    ('EMAIL', r'\b[\w.-]+@[\w.-]+\.\w{2,4}\b', False),
    ('PHONE', r'(?<!\d)(?:\+\d{1,3}[-. ]*|\d{1,3}[-. (]+)?[-. (]*\d{3}[-. )]*\d{3}[-. ]*\d{4}(?: *x\d+)?(?!\d)', False),
    ('DATE', r'\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4}', False),
    ('LINK', r'https?://[^\s]+|www\.[^\s]+', True),
    ('CREDIT_CARD', r'\b(?:\d[ -]*?){13,16}\b', False),
    ('PRICE', r'[$€£] ?\d+|\d+ ?(?:USD|EUR|GBP)', False),
    ('ADDRESS', r'(?i)\d+\s+[a-z\s]+(?:st|rd|ave|dr|ln|blvd|way|plaza|lane|road|avenue|street|drive)\b', False),
]

# Field keys whose right/below neighbour inherits a category
KEY_VALUE_TRIGGERS = [
    ('NAME', r'^(name|customer|cardholder|sold to|bill to|ship to)\s*:?$'),
    ('ADDRESS', r'^(address|residence|location)\s*:?$'),
    ('PRICE', r'^(total|amount|due|balance|pay)\s*:?$'),
]

# Spatial key->value thresholds. Empirical tuning values.
SPATIAL_THRESHOLDS = {
    'same_line_ratio': 0.8,   # |center dy| < ratio * key height
    'below_ratio': 4.0,       # vertical gap < ratio * key height
    'max_overlap': 50,        # allowed horizontal overlap to the right
}

# Inference prompt templates
OCR_PROMPTS = {
    'ocr_with_region': '<image>\n<|grounding|>OCR this image.',
}

# Default inference parameters
DEFAULT_INFERENCE_PARAMS = {
    'max_tokens': 1024,
    'temperature': 0.0,
    'max_image_size': 2048,
}

# Grounding output coordinates are normalized to 0..GROUNDING_SCALE
GROUNDING_SCALE = 999.0

# Grounding format regex pattern
GROUNDING_PATTERN = r'(<\|ref\|>(.*?)<\|/ref\|><\|det\|>(.*?)<\|/det\|>)'
