"""
Bounding box utilities for detection output.

Handles parsing raw model output into regions and drawing review overlays.
"""
import ast
import logging
import re
from typing import Dict, Iterable, List, Optional

from PIL import Image, ImageDraw, ImageFont

from core.constants import GROUNDING_PATTERN, GROUNDING_SCALE
from core.models import Box, Category, RawRegion

logger = logging.getLogger(__name__)


# Overlay colours per category (RGB)
CATEGORY_COLORS = {
    Category.EMAIL: (59, 130, 246),
    Category.PHONE: (16, 185, 129),
    Category.CREDIT_CARD: (239, 68, 68),
    Category.DATE: (245, 158, 11),
    Category.LINK: (139, 92, 246),
    Category.NAME: (236, 72, 153),
    Category.ADDRESS: (20, 184, 166),
    Category.PRICE: (234, 179, 8),
    Category.DEFAULT: (120, 113, 108),
}


def extract_grounding_references(text: str) -> List[tuple]:
    """
    Extract grounding references in the format <|ref|>label<|/ref|><|det|>[[coords]]<|/det|>.

    Args:
        text: Text containing grounding references

    Returns:
        List of tuples: (full_match, label, coords_str)
    """
    return re.findall(GROUNDING_PATTERN, text, re.DOTALL)


def parse_grounding_output(
    text: str,
    img_width: int,
    img_height: int
) -> List[RawRegion]:
    """
    Parse grounded OCR output into raw regions in image pixels.

    Coordinates are emitted normalized to 0-999 and scaled here. A
    reference may carry several boxes; each becomes its own region with
    the same label. Unparseable references are skipped.

    Args:
        text: Model output with grounding tags
        img_width: Image width for scaling normalized coordinates
        img_height: Image height for scaling normalized coordinates

    Returns:
        List of RawRegion
    """
    regions = []

    for _, label, coords_str in extract_grounding_references(text):
        label = label.strip()
        try:
            coords = ast.literal_eval(coords_str.strip())
        except (ValueError, SyntaxError) as e:
            logger.warning("Could not parse coordinates for label %r: %s", label, e)
            continue

        if not isinstance(coords, (list, tuple)):
            logger.warning("Unexpected coordinates for label %r: %r", label, coords)
            continue
        if coords and isinstance(coords[0], (int, float)):
            coords = [coords]

        for box in coords:
            if not isinstance(box, (list, tuple)) or len(box) not in (4, 8):
                logger.warning("Skipping malformed region %r: %r", label, box)
                continue
            scaled = [
                value / GROUNDING_SCALE * (img_width if i % 2 == 0 else img_height)
                for i, value in enumerate(box)
            ]
            regions.append(RawRegion(label=label, coords=scaled))

    return regions


def regions_from_prediction(prediction: Optional[Dict]) -> List[RawRegion]:
    """
    Convert a post-processed prediction mapping into raw regions.

    The mapping holds ``labels`` plus either ``bboxes`` (4 values each)
    or ``quad_boxes`` (8 values each). ``bboxes`` wins when both exist.

    Args:
        prediction: Mapping from the model's post-processor, or None

    Returns:
        List of RawRegion (empty when nothing usable is present)
    """
    if not prediction:
        return []

    boxes = prediction.get('bboxes') or prediction.get('quad_boxes')
    if not boxes or not isinstance(boxes, (list, tuple)):
        logger.warning("No bboxes or quad_boxes found in prediction")
        return []

    labels = prediction.get('labels') or []
    scores = prediction.get('scores') or []

    regions = []
    for i, coords in enumerate(boxes):
        label = labels[i] if i < len(labels) else ''
        score = scores[i] if i < len(scores) else None
        regions.append(RawRegion(label=label or '', coords=list(coords), score=score))
    return regions


def _load_font(size: int = 14):
    try:
        return ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", size)
    except OSError:
        return ImageFont.load_default()


def draw_category_boxes(
    image: Image.Image,
    boxes: Iterable[Box],
    show_labels: bool = True
) -> Image.Image:
    """
    Draw boxes on a copy of ``image``, coloured by category.

    Args:
        image: PIL Image to draw on
        boxes: Boxes in image space
        show_labels: Whether to draw a category tag above each box

    Returns:
        Annotated copy of the image
    """
    img_draw = image.convert('RGB').copy()
    draw = ImageDraw.Draw(img_draw)
    overlay = Image.new('RGBA', img_draw.size, (0, 0, 0, 0))
    draw_overlay = ImageDraw.Draw(overlay)
    font = _load_font()

    for box in boxes:
        category = box.category or Category.DEFAULT
        color = CATEGORY_COLORS[category]
        x1, y1, x2, y2 = box.x, box.y, box.x2, box.y2

        draw.rectangle([x1, y1, x2, y2], outline=color, width=2)
        draw_overlay.rectangle([x1, y1, x2, y2], fill=color + (60,))

        if show_labels:
            tag = category.value
            text_bbox = draw.textbbox((0, 0), tag, font=font)
            tw = text_bbox[2] - text_bbox[0]
            th = text_bbox[3] - text_bbox[1]
            ty = max(0, y1 - th - 4)
            draw.rectangle([x1, ty, x1 + tw + 4, ty + th + 4], fill=color)
            draw.text((x1 + 2, ty + 2), tag, font=font, fill=(255, 255, 255))

    img_draw.paste(overlay, (0, 0), overlay)
    return img_draw

