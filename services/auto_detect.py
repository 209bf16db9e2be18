"""
Auto-detect Service - one detection run from image to staged review.

Flow: load model (once) -> detect -> categorize -> drop blank labels ->
stage for review. Only one run may be in flight; a second call while one
is pending returns None without doing any work. Results of a run whose
image session was replaced or reset meanwhile are discarded.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from detection.pipeline import DetectionPipeline
from editor.store import BoxStore
from services.inference_service import BaseInferenceBackend, ProgressCallback
from services.review_service import ReviewWorkflow

logger = logging.getLogger(__name__)


class DetectionStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    PROCESSING = "processing"


class AutoDetectService:
    """Runs detection and stages the results."""

    def __init__(
        self,
        store: BoxStore,
        backend: BaseInferenceBackend,
        review: ReviewWorkflow,
        pipeline: Optional[DetectionPipeline] = None,
        on_status: Optional[Callable[[DetectionStatus], None]] = None
    ):
        """
        Initialize service.

        Args:
            store: Store holding the current image
            backend: Inference backend
            review: Workflow receiving the staged candidates
            pipeline: Post-processing pipeline (default settings if omitted)
            on_status: Optional callback for status changes
        """
        self.store = store
        self.backend = backend
        self.review = review
        self.pipeline = pipeline or DetectionPipeline()
        self.on_status = on_status

        self.status = DetectionStatus.IDLE
        self.progress = 0.0
        self.progress_text = ''
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _set_status(self, status: DetectionStatus):
        self.status = status
        if self.on_status is not None:
            self.on_status(status)

    def _progress_handler(self, on_progress: Optional[ProgressCallback]) -> ProgressCallback:
        def handle(percent: float, text: str):
            self.progress = round(percent)
            self.progress_text = text
            if on_progress is not None:
                on_progress(percent, text)
        return handle

    async def run(self, image=None, on_progress: Optional[ProgressCallback] = None) -> Optional[int]:
        """
        Detect PII candidates in the current image and stage them.

        Args:
            image: Image to scan (defaults to the store's image)
            on_progress: Optional callback(percent, text) during model load

        Returns:
            Number of staged candidates (0 when nothing was found), or None
            if the call was a no-op or its result was discarded

        Raises:
            InferenceError: If model load or inference fails
        """
        if self._in_flight:
            logger.debug("Detection already in progress")
            return None

        image = image if image is not None else self.store.image
        if image is None:
            return None

        self._in_flight = True
        generation = self.store.generation
        try:
            self._set_status(DetectionStatus.LOADING)
            await self.backend.load_model(self._progress_handler(on_progress))

            self._set_status(DetectionStatus.PROCESSING)
            detections = await self.pipeline.run(self.backend, image)
            candidates = [d for d in detections if d.label and d.label.strip()]

            if self.store.generation != generation:
                logger.info("Image changed during detection, discarding results")
                return None

            if not candidates:
                logger.info("No text detected in this image")
                return 0

            return self.review.stage(candidates)
        finally:
            self._in_flight = False
            self.progress = 0.0
            self.progress_text = ''
            self._set_status(DetectionStatus.IDLE)
