"""
Geometry utilities for the redaction editor.

All box geometry is stored in unscaled image space. Zoom is a view
transform only: pointer positions are mapped into image space here and
nowhere else.
"""
from typing import NamedTuple, Optional, Sequence, Tuple

from core.constants import EDITOR_CONSTANTS


class Point(NamedTuple):
    """A 2D point."""
    x: float
    y: float


def to_image_space(
    screen_point: Tuple[float, float],
    container_origin: Tuple[float, float],
    zoom: float
) -> Point:
    """
    Convert a pointer position to image-space coordinates.

    Args:
        screen_point: Pointer position in screen/client pixels
        container_origin: Top-left of the zoomed canvas in screen pixels
        zoom: View scale factor

    Returns:
        Point in unscaled image space
    """
    if zoom <= 0:
        zoom = EDITOR_CONSTANTS['min_zoom']
    return Point(
        (screen_point[0] - container_origin[0]) / zoom,
        (screen_point[1] - container_origin[1]) / zoom
    )


def to_screen_space(
    image_point: Tuple[float, float],
    container_origin: Tuple[float, float],
    zoom: float
) -> Point:
    """Inverse of ``to_image_space``."""
    return Point(
        image_point[0] * zoom + container_origin[0],
        image_point[1] * zoom + container_origin[1]
    )


def rect_from_points(
    start: Tuple[float, float],
    current: Tuple[float, float]
) -> Tuple[float, float, float, float]:
    """
    Build a normalized rectangle from two drag corners.

    Returns:
        Tuple of (x, y, width, height) with non-negative size
    """
    x = min(start[0], current[0])
    y = min(start[1], current[1])
    return x, y, abs(current[0] - start[0]), abs(current[1] - start[1])


def resize_rect(
    initial: Tuple[float, float, float, float],
    handle: str,
    dx: float,
    dy: float,
    min_size: float = EDITOR_CONSTANTS['min_box_size']
) -> Tuple[float, float, float, float]:
    """
    Resize a rectangle by dragging one corner handle.

    The corner opposite ``handle`` stays fixed and both dimensions are
    clamped to ``min_size``.

    Args:
        initial: (x, y, width, height) at gesture start
        handle: One of 'nw', 'ne', 'sw', 'se'
        dx: Horizontal pointer delta in image space
        dy: Vertical pointer delta in image space
        min_size: Minimum width/height

    Returns:
        Tuple of (x, y, width, height)
    """
    x, y, width, height = initial
    new_x, new_y, new_w, new_h = x, y, width, height

    if 'e' in handle:
        new_w = max(min_size, width + dx)
    if 'w' in handle:
        new_w = max(min_size, width - dx)
        new_x = x + (width - new_w)
    if 's' in handle:
        new_h = max(min_size, height + dy)
    if 'n' in handle:
        new_h = max(min_size, height - dy)
        new_y = y + (height - new_h)

    return new_x, new_y, new_w, new_h


def quad_to_box(coords: Sequence[float]) -> Tuple[float, float, float, float]:
    """
    Collapse a quadrilateral to its axis-aligned bounding box.

    Rotated text becomes its enclosing rectangle.

    Args:
        coords: [x1, y1, x2, y2, x3, y3, x4, y4]

    Returns:
        Tuple of (xmin, ymin, xmax, ymax)
    """
    xs = coords[0::2]
    ys = coords[1::2]
    return min(xs), min(ys), max(xs), max(ys)


def normalize_region(coords: Sequence[float]) -> Optional[Tuple[float, float, float, float]]:
    """
    Normalize a 4-value box or 8-value quad to (xmin, ymin, xmax, ymax).

    Returns:
        Axis-aligned box, or None if the coordinate count is unsupported
    """
    if len(coords) == 8:
        return quad_to_box(coords)
    if len(coords) == 4:
        x1, y1, x2, y2 = coords
        return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)
    return None


def horizontal_overlap(
    a: Tuple[float, float, float, float],
    b: Tuple[float, float, float, float]
) -> float:
    """Length of the overlap of two (x1, y1, x2, y2) boxes on the x axis."""
    return max(0.0, min(a[2], b[2]) - max(a[0], b[0]))


def contains_point(
    rect: Tuple[float, float, float, float],
    point: Tuple[float, float]
) -> bool:
    """Check whether (x, y, width, height) contains ``point`` (edges inclusive)."""
    x, y, width, height = rect
    return x <= point[0] <= x + width and y <= point[1] <= y + height


def corner_points(rect: Tuple[float, float, float, float]) -> dict:
    """Map each resize handle name to its corner position."""
    x, y, width, height = rect
    return {
        'nw': Point(x, y),
        'ne': Point(x + width, y),
        'sw': Point(x, y + height),
        'se': Point(x + width, y + height),
    }


def clamp_zoom(
    zoom: float,
    min_zoom: float = EDITOR_CONSTANTS['min_zoom'],
    max_zoom: float = EDITOR_CONSTANTS['max_zoom']
) -> float:
    """Clamp a zoom factor to the allowed range."""
    return max(min_zoom, min(zoom, max_zoom))


def fit_zoom(
    container_width: float,
    container_height: float,
    image_width: float,
    image_height: float,
    padding: float = EDITOR_CONSTANTS['editor_padding'],
    min_dimension: float = EDITOR_CONSTANTS['min_editor_dimension']
) -> Optional[float]:
    """
    Compute the zoom that fits an image inside a container.

    Small images are never zoomed beyond 100%.

    Returns:
        Zoom factor, or None when the container is too small to fit into
    """
    if image_width <= 0 or image_height <= 0:
        return None

    available_w = container_width - padding
    available_h = container_height - padding
    if available_w <= min_dimension or available_h <= min_dimension:
        return None

    scale = min(available_w / image_width, available_h / image_height)
    return min(scale, 1.0)
