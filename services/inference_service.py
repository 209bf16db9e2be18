"""
Inference Service - vision model access for text detection.

Defines the backend interface the detection flow depends on and an
implementation for an OpenAI-compatible server (e.g. vLLM) running a
grounding OCR model.

Model loading is guarded: concurrent ``load_model`` calls share one
in-flight load, and a loaded backend returns immediately.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from core.constants import DEFAULT_INFERENCE_PARAMS, OCR_PROMPTS
from core.models import RawRegion
from utils.bbox_utils import parse_grounding_output
from utils.image_utils import image_to_base64

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


class InferenceError(RuntimeError):
    """Model load or inference failed in the backend."""


class ModelNotLoadedError(InferenceError):
    """detect() was called before load_model() completed."""


def _consume_load_error(task: asyncio.Task):
    # Marks the error retrieved when every waiter was cancelled
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Model load ended with error: %s", task.exception())


def _report(on_progress: Optional[ProgressCallback], percent: float, text: str):
    if on_progress is not None:
        on_progress(percent, text)


class BaseInferenceBackend(ABC):
    """
    Abstract base class for inference backends.

    Subclasses implement ``_load`` and ``_infer``; the guard around
    loading and the error wrapping live here.
    """

    def __init__(self):
        self._loaded = False
        self._load_task: Optional[asyncio.Task] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_loading(self) -> bool:
        return self._load_task is not None and not self._load_task.done()

    async def load_model(self, on_progress: Optional[ProgressCallback] = None):
        """
        Load the model once.

        Returns immediately when already loaded. While a load is in
        flight, further calls wait on that same load instead of starting
        another one. A caller that stops waiting does not cancel the load.

        Args:
            on_progress: Optional callback(percent, text) for the first caller

        Raises:
            InferenceError: If both the primary and fallback loads fail
        """
        if self._loaded:
            return

        if self._load_task is None or self._load_task.done():
            self._load_task = asyncio.ensure_future(self._guarded_load(on_progress))
            self._load_task.add_done_callback(_consume_load_error)

        task = self._load_task
        try:
            await asyncio.shield(task)
        finally:
            if task.done() and self._load_task is task:
                self._load_task = None

    async def _guarded_load(self, on_progress: Optional[ProgressCallback]):
        _report(on_progress, 10, 'Initializing AI models...')
        try:
            await self._load(fallback=False, on_progress=on_progress)
        except Exception as e:
            logger.warning("Primary model load failed, falling back: %s", e)
            _report(on_progress, 0, f"Load error: {e}. Falling back...")
            try:
                await self._load(fallback=True, on_progress=on_progress)
            except Exception as fallback_error:
                logger.error("Fallback model load failed: %s", fallback_error)
                if isinstance(fallback_error, InferenceError):
                    raise
                raise InferenceError(f"Failed to load model: {fallback_error}") from fallback_error

        self._loaded = True
        _report(on_progress, 100, 'Model ready')
        logger.info("Inference model loaded")

    async def detect(self, image) -> List[RawRegion]:
        """
        Run text detection on an image.

        Args:
            image: PIL Image

        Returns:
            Raw regions (label + 4 or 8 coordinates) in image pixels

        Raises:
            ModelNotLoadedError: If load_model() has not completed
            InferenceError: If the backend fails
        """
        if not self._loaded:
            raise ModelNotLoadedError("Model not loaded. Call load_model() first.")

        try:
            return await self._infer(image)
        except InferenceError:
            raise
        except Exception as e:
            logger.error("Inference failed: %s", e)
            raise InferenceError(f"Inference failed: {e}") from e

    @abstractmethod
    async def _load(self, fallback: bool, on_progress: Optional[ProgressCallback]):
        """Load model resources. ``fallback`` selects the degraded configuration."""

    @abstractmethod
    async def _infer(self, image) -> List[RawRegion]:
        """Run the model and return raw regions."""


class GroundingOCRBackend(BaseInferenceBackend):
    """Grounding OCR served behind an OpenAI-compatible chat API."""

    def __init__(
        self,
        client,
        model: str = "ocr",
        fallback_model: Optional[str] = None,
        prompt: str = OCR_PROMPTS['ocr_with_region'],
        max_tokens: int = DEFAULT_INFERENCE_PARAMS['max_tokens'],
        temperature: float = DEFAULT_INFERENCE_PARAMS['temperature'],
        max_image_size: int = DEFAULT_INFERENCE_PARAMS['max_image_size']
    ):
        """
        Initialize backend.

        Args:
            client: AsyncOpenAI client instance
            model: Served model name
            fallback_model: Model to try when ``model`` is unavailable
            prompt: Grounding prompt
            max_tokens: Generation limit
            temperature: Sampling temperature (0 for deterministic output)
            max_image_size: Longest side of the image sent to the server
        """
        super().__init__()
        self.client = client
        self.model = model
        self.fallback_model = fallback_model or None
        self.prompt = prompt
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_image_size = max_image_size
        self.active_model: Optional[str] = None

    async def _load(self, fallback: bool, on_progress: Optional[ProgressCallback]):
        model = self.fallback_model if fallback else self.model
        if model is None:
            raise InferenceError("No fallback model configured")

        _report(on_progress, 50, f"Connecting to {model}...")
        response = await self.client.models.list()
        served = {entry.id for entry in response.data}
        if model not in served:
            raise InferenceError(f"Model '{model}' is not served (available: {sorted(served)})")

        self.active_model = model
        _report(on_progress, 90, f"Loaded {model}")

    async def _infer(self, image) -> List[RawRegion]:
        img_b64 = image_to_base64(image, max_size=self.max_image_size)
        img_width, img_height = image.size

        response = await self.client.chat.completions.create(
            model=self.active_model,
            messages=[{
                "role": "user",
                "content": [
                    {"type": "text", "text": self.prompt},
                    {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{img_b64}"}}
                ]
            }],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            extra_body={
                "skip_special_tokens": False,
            }
        )

        text = response.choices[0].message.content or ""
        regions = parse_grounding_output(text, img_width, img_height)
        logger.info("Model returned %d regions", len(regions))
        return regions
