"""Utilities package - Helper functions for geometry, bbox parsing and images."""

from .geometry import (
    Point,
    to_image_space,
    to_screen_space,
    rect_from_points,
    resize_rect,
    quad_to_box,
    normalize_region,
    horizontal_overlap,
    contains_point,
    corner_points,
    clamp_zoom,
    fit_zoom
)

from .bbox_utils import (
    extract_grounding_references,
    parse_grounding_output,
    regions_from_prediction,
    draw_category_boxes
)

from .image_utils import (
    load_image,
    render_pdf_page,
    count_pdf_pages,
    image_to_base64,
    generate_pixelated_version,
    export_redacted,
    save_png
)

__all__ = [
    # Geometry
    'Point',
    'to_image_space',
    'to_screen_space',
    'rect_from_points',
    'resize_rect',
    'quad_to_box',
    'normalize_region',
    'horizontal_overlap',
    'contains_point',
    'corner_points',
    'clamp_zoom',
    'fit_zoom',

    # BBox utils
    'extract_grounding_references',
    'parse_grounding_output',
    'regions_from_prediction',
    'draw_category_boxes',

    # Image utils
    'load_image',
    'render_pdf_page',
    'count_pdf_pages',
    'image_to_base64',
    'generate_pixelated_version',
    'export_redacted',
    'save_png'
]
