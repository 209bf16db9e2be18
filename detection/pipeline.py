"""
Detection Pipeline - raw model regions to categorized boxes.

Steps:
1. Normalize: 8-point quads collapse to their axis-aligned bounds.
2. Lexical categorization of every label.
3. Spatial key->value refinement.

The pipeline never touches editor state. Post-processing failures are
logged and produce an empty result so callers can report "nothing found".
"""
import logging
from typing import Dict, List, Optional, Sequence

from core.constants import SPATIAL_THRESHOLDS
from core.models import DetectedBox, RawRegion
from detection.categorize import (
    CATEGORY_RULES,
    KEY_TRIGGERS,
    apply_spatial_categorization,
    categorize_text
)
from utils.bbox_utils import regions_from_prediction
from utils.geometry import normalize_region

logger = logging.getLogger(__name__)


def normalize_regions(regions: Sequence[RawRegion]) -> List[DetectedBox]:
    """
    Convert raw regions to axis-aligned, uncategorized boxes.

    Regions with an unsupported coordinate count are skipped.
    """
    boxes = []
    for region in regions:
        box = normalize_region(region.coords)
        if box is None:
            logger.warning(
                "Skipping region %r with %d coordinates", region.label, len(region.coords)
            )
            continue
        boxes.append(DetectedBox(label=region.label or '', box=box, score=region.score))
    return boxes


class DetectionPipeline:
    """Normalizes and categorizes detections."""

    def __init__(
        self,
        rules=CATEGORY_RULES,
        triggers=KEY_TRIGGERS,
        spatial_config: Optional[Dict] = None
    ):
        """
        Initialize pipeline.

        Args:
            rules: Ordered (predicate, category) pairs for lexical matching
            triggers: Compiled field-key patterns
            spatial_config: same_line_ratio, below_ratio, max_overlap
        """
        self.rules = rules
        self.triggers = triggers
        self.spatial_config = dict(SPATIAL_THRESHOLDS)
        if spatial_config:
            self.spatial_config.update(spatial_config)

    def process(self, regions: Sequence[RawRegion]) -> List[DetectedBox]:
        """
        Run all post-processing steps.

        Args:
            regions: Raw model regions

        Returns:
            Categorized boxes, or [] on empty input or failure
        """
        if not regions:
            return []

        try:
            boxes = normalize_regions(regions)
            for box in boxes:
                box.category = categorize_text(box.label, self.rules)
            boxes = apply_spatial_categorization(boxes, self.triggers, **self.spatial_config)
        except Exception as e:
            logger.warning("Detection post-processing failed: %s", e)
            return []

        logger.info("Categorized %d detected boxes", len(boxes))
        return boxes

    def process_prediction(self, prediction: Optional[Dict]) -> List[DetectedBox]:
        """Run the pipeline on a post-processed prediction mapping."""
        try:
            regions = regions_from_prediction(prediction)
        except Exception as e:
            logger.warning("Could not read prediction: %s", e)
            return []
        return self.process(regions)

    async def run(self, backend, image) -> List[DetectedBox]:
        """
        Detect and categorize in one call.

        Backend failures propagate; post-processing failures give [].

        Args:
            backend: Loaded inference backend
            image: PIL Image

        Returns:
            Categorized boxes
        """
        regions = await backend.detect(image)
        return self.process(regions)
