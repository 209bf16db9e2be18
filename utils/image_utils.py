"""
Image utilities for the redaction editor.

Handles image loading, PDF page rendering, pixelation and export.
"""
import base64
import math
from io import BytesIO
from pathlib import Path
from typing import Iterable, Union

import fitz  # PyMuPDF
from PIL import Image, ImageOps

from core.constants import EDITOR_CONSTANTS
from core.models import Box


def load_image(image_path: Union[str, Path]) -> Image.Image:
    """
    Load an image from disk, honouring EXIF orientation.

    Args:
        image_path: Path to the image file

    Returns:
        RGB PIL Image
    """
    img = Image.open(image_path)
    img = ImageOps.exif_transpose(img)
    if img.mode != 'RGB':
        img = img.convert('RGB')
    return img


def render_pdf_page(pdf_path: Union[str, Path], page_num: int, target_dpi: int = 200) -> Image.Image:
    """
    Render a PDF page to a PIL Image.

    Args:
        pdf_path: Path to the PDF file
        page_num: 1-indexed page number
        target_dpi: Target DPI for rendering (default 200)

    Returns:
        RGB PIL Image
    """
    doc = fitz.open(pdf_path)
    try:
        page = doc.load_page(page_num - 1)  # 0-indexed
        mat = fitz.Matrix(target_dpi / 72, target_dpi / 72)
        pix = page.get_pixmap(matrix=mat, alpha=False)
        img = Image.open(BytesIO(pix.tobytes("png")))
        img.load()
    finally:
        doc.close()
    return img.convert('RGB')


def count_pdf_pages(pdf_path: Union[str, Path]) -> int:
    """Return the number of pages in a PDF."""
    with fitz.open(pdf_path) as doc:
        return doc.page_count


def image_to_base64(image: Image.Image, max_size: int = 2048) -> str:
    """
    Encode an image as base64 PNG, downscaling if needed.

    Args:
        image: PIL Image
        max_size: Maximum dimension (width or height) before resizing

    Returns:
        Base64-encoded PNG string
    """
    img = image
    if max(img.size) > max_size:
        img = img.copy()
        img.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)

    buf = BytesIO()
    img.save(buf, format='PNG')
    return base64.b64encode(buf.getvalue()).decode()


def generate_pixelated_version(
    image: Image.Image,
    pixel_factor: float = EDITOR_CONSTANTS['pixelation_factor']
) -> Image.Image:
    """
    Generate a pixelated copy of an image at the original size.

    The image is downscaled by ``pixel_factor`` (at least 1px per side)
    and upscaled back with nearest-neighbour sampling.

    Args:
        image: Source image
        pixel_factor: Downscale factor in (0, 1]. Smaller is coarser.

    Returns:
        Pixelated PIL Image with the same size as ``image``
    """
    width, height = image.size
    small_w = max(1, math.floor(width * pixel_factor))
    small_h = max(1, math.floor(height * pixel_factor))

    small = image.resize((small_w, small_h), Image.Resampling.BILINEAR)
    return small.resize((width, height), Image.Resampling.NEAREST)


def export_redacted(
    image: Image.Image,
    pixelated: Image.Image,
    boxes: Iterable[Box]
) -> Image.Image:
    """
    Compose the redacted image.

    Every box region of the original is replaced with the same region of
    the pixelated image. Boxes are clipped to the image bounds.

    Args:
        image: Original image
        pixelated: Pixelated image of the same size
        boxes: Committed boxes in image space

    Returns:
        New PIL Image with the redactions applied
    """
    result = image.convert('RGB').copy()
    width, height = result.size

    for box in boxes:
        left = max(0, int(math.floor(box.x)))
        top = max(0, int(math.floor(box.y)))
        right = min(width, int(math.ceil(box.x2)))
        bottom = min(height, int(math.ceil(box.y2)))
        if right <= left or bottom <= top:
            continue
        region = pixelated.crop((left, top, right, bottom))
        result.paste(region, (left, top))

    return result


def save_png(image: Image.Image, output_path: Union[str, Path]) -> Path:
    """Save an image as PNG, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format='PNG')
    return output_path
