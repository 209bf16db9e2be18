#!/usr/bin/env python3
"""
CLI workflow runner for PII detection and redaction.

Runs auto-detect on an image or PDF page, accepts the detected
categories and writes the pixelated result. Also manages category
presets.
"""
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import settings
from core.constants import CATEGORY_LABELS
from services.factory import create_editor_session, get_preset_service
from services.inference_service import InferenceError
from utils.bbox_utils import draw_category_boxes
from utils.image_utils import (
    count_pdf_pages,
    export_redacted,
    generate_pixelated_version,
    load_image,
    render_pdf_page,
    save_png
)

logger = logging.getLogger(__name__)


def _print_progress(percent: float, text: str):
    print(f"  [{percent:3.0f}%] {text}")


def _load_input(file_path: str, page_num: int):
    if file_path.lower().endswith('.pdf'):
        num_pages = count_pdf_pages(file_path)
        if not 1 <= page_num <= num_pages:
            raise ValueError(f"Page {page_num} out of range (1-{num_pages})")
        return render_pdf_page(file_path, page_num)
    return load_image(file_path)


async def detect_cli(
    file_path: str,
    output_path: str = None,
    categories: list = None,
    page_num: int = 1,
    annotate_path: str = None
):
    """Detect PII in a document page and write the redacted image."""

    print("=" * 60)
    print(f"Detecting PII: {file_path}")
    print("=" * 60)

    if not os.path.exists(file_path):
        print(f"❌ Error: File not found: {file_path}")
        return None

    try:
        image = _load_input(file_path, page_num)
    except ValueError as e:
        print(f"❌ Error: {e}")
        return None

    width, height = image.size
    pixelated = generate_pixelated_version(image, settings.pixelation_factor)

    session = create_editor_session(settings)
    session.store.load_image(image, pixelated, width, height)

    print(f"Image size: {width}x{height}")
    print(f"\nLoading model {settings.inference_model}...")
    try:
        staged = await session.auto_detect.run(on_progress=_print_progress)
    except InferenceError as e:
        logger.debug("Detection failed", exc_info=True)
        print(f"❌ Detection failed: {e}")
        return None

    if not staged:
        print("\nNo text detected in this image.")
        return None

    print(f"\n✓ Found {staged} text regions:")
    for category, boxes in session.review.grouped().items():
        print(f"  {CATEGORY_LABELS[category.value]:<16} {len(boxes)}")

    if categories:
        session.review.set_categories(categories)

    breakdown = session.review.confirm()
    if not breakdown:
        print("\nNo categories selected, nothing redacted.")
        return None

    print(f"\n✓ Redacting {sum(breakdown.values())} boxes")
    for category, count in breakdown.items():
        print(f"  {category:<16} {count}")

    if output_path is None:
        output_path = f"{Path(file_path).stem}_redacted.png"

    redacted = export_redacted(image, pixelated, session.store.boxes)
    save_png(redacted, output_path)
    print(f"\n✓ Redacted image saved to: {output_path}")

    if annotate_path:
        annotated = draw_category_boxes(image, session.store.boxes)
        save_png(annotated, annotate_path)
        print(f"✓ Annotated review image saved to: {annotate_path}")

    print("=" * 60)
    return output_path


def list_presets_cli():
    """List all category presets."""
    presets = get_preset_service(settings).list_presets()

    if not presets:
        print("No presets found.")
        return

    print(f"\nFound {len(presets)} presets:")
    print("-" * 80)
    print(f"{'ID':<38} {'Name':<20} {'Categories'}")
    print("-" * 80)

    for preset in presets:
        print(f"{preset.id:<38} {preset.name:<20} {', '.join(preset.categories)}")


def save_preset_cli(name: str, categories: list):
    """Save a new category preset."""
    try:
        preset = get_preset_service(settings).create_preset(name, categories)
    except ValueError as e:
        print(f"❌ Error: {e}")
        return None

    print(f"✓ Preset saved: {preset.name} ({preset.id})")
    return preset


def delete_preset_cli(preset_id: str):
    """Delete a category preset."""
    if get_preset_service(settings).delete_preset(preset_id):
        print(f"✓ Preset deleted: {preset_id}")
    else:
        print(f"❌ Preset not found: {preset_id}")


def init_db_cli(drop_existing: bool = False):
    """Create the preset tables, optionally dropping existing ones first."""
    service = get_preset_service(settings, create_tables=False)
    if drop_existing:
        print("⚠️  Dropping existing tables...")
        service.db_manager.drop_tables()
    service.db_manager.create_tables()
    print(f"✓ Database initialized: {settings.database_url}")


def main():
    parser = argparse.ArgumentParser(
        description='PII detection and redaction CLI workflow'
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Detect command
    detect_parser = subparsers.add_parser('detect', help='Detect and redact PII in an image or PDF page')
    detect_parser.add_argument('file', type=str, help='Image or PDF file')
    detect_parser.add_argument('-o', '--output', type=str, help='Output PNG path')
    detect_parser.add_argument('--categories', nargs='+', help='Only redact these categories, case-insensitive (e.g. EMAIL phone)')
    detect_parser.add_argument('--page', type=int, default=1, help='PDF page number (1-indexed)')
    detect_parser.add_argument('--annotate', type=str, help='Also save a category-coloured review image')

    # Presets command
    presets_parser = subparsers.add_parser('presets', help='Manage category presets')
    presets_sub = presets_parser.add_subparsers(dest='action', help='Preset action')
    presets_sub.add_parser('list', help='List presets')
    save_parser = presets_sub.add_parser('save', help='Save a preset')
    save_parser.add_argument('name', type=str, help='Preset name')
    save_parser.add_argument('categories', nargs='+', help='Categories to include')
    delete_parser = presets_sub.add_parser('delete', help='Delete a preset')
    delete_parser.add_argument('preset_id', type=str, help='Preset ID')

    # Init DB command
    init_parser = subparsers.add_parser('init-db', help='Create preset tables')
    init_parser.add_argument(
        '--drop-existing',
        action='store_true',
        help='Drop existing tables before creating (WARNING: deletes all presets)'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.command == 'detect':
        asyncio.run(detect_cli(
            file_path=args.file,
            output_path=args.output,
            categories=args.categories,
            page_num=args.page,
            annotate_path=args.annotate
        ))
    elif args.command == 'presets':
        if args.action == 'list':
            list_presets_cli()
        elif args.action == 'save':
            save_preset_cli(args.name, args.categories)
        elif args.action == 'delete':
            delete_preset_cli(args.preset_id)
        else:
            presets_parser.print_help()
    elif args.command == 'init-db':
        init_db_cli(drop_existing=args.drop_existing)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
