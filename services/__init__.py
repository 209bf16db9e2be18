"""Services package - Inference, review, presets and session wiring."""

from .inference_service import (
    BaseInferenceBackend,
    GroundingOCRBackend,
    InferenceError,
    ModelNotLoadedError
)
from .review_service import ReviewWorkflow
from .preset_service import PresetService
from .auto_detect import AutoDetectService, DetectionStatus

__all__ = [
    'BaseInferenceBackend',
    'GroundingOCRBackend',
    'InferenceError',
    'ModelNotLoadedError',
    'ReviewWorkflow',
    'PresetService',
    'AutoDetectService',
    'DetectionStatus'
]
