"""
Service factory - builds an editing session from settings.

Everything is constructed explicitly and passed in; there are no module
level store or service singletons.
"""
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI

from config.settings import Settings, settings as default_settings
from data.database import DatabaseManager
from detection.pipeline import DetectionPipeline
from editor.interaction import InteractionController
from editor.shortcuts import ShortcutHandler
from editor.store import BoxStore
from services.auto_detect import AutoDetectService
from services.inference_service import BaseInferenceBackend, GroundingOCRBackend
from services.preset_service import PresetService
from services.review_service import ReviewWorkflow


@dataclass
class EditorSession:
    """All collaborating objects for one editing session."""
    store: BoxStore
    controller: InteractionController
    shortcuts: ShortcutHandler
    review: ReviewWorkflow
    auto_detect: AutoDetectService


def get_inference_client(config: Optional[Settings] = None) -> AsyncOpenAI:
    """
    Create the inference client.

    Returns:
        AsyncOpenAI client configured for the model server
    """
    config = config or default_settings
    return AsyncOpenAI(
        api_key=config.inference_api_key,
        base_url=config.inference_server_url
    )


def get_inference_backend(
    config: Optional[Settings] = None,
    client: Optional[AsyncOpenAI] = None
) -> GroundingOCRBackend:
    """Create the grounding OCR backend."""
    config = config or default_settings
    if client is None:
        client = get_inference_client(config)

    params = config.get_inference_config()
    return GroundingOCRBackend(
        client=client,
        model=config.inference_model,
        fallback_model=config.inference_fallback_model,
        max_tokens=params['max_tokens'],
        temperature=params['temperature'],
        max_image_size=params['max_image_size']
    )


def get_preset_service(
    config: Optional[Settings] = None,
    user_id: str = "local",
    create_tables: bool = True
) -> PresetService:
    """Create the preset service backed by the configured database."""
    config = config or default_settings
    db_manager = DatabaseManager(config.database_url)
    if create_tables:
        db_manager.create_tables()
    return PresetService(db_manager, user_id=user_id)


def create_editor_session(
    config: Optional[Settings] = None,
    backend: Optional[BaseInferenceBackend] = None,
    presets=None,
    viewport_size=None
) -> EditorSession:
    """
    Wire up a complete editing session.

    Args:
        config: Settings (module defaults if omitted)
        backend: Inference backend (grounding OCR backend if omitted)
        presets: Preset service, or None to disable presets
        viewport_size: Callable returning (width, height) for zoom-to-fit

    Returns:
        EditorSession
    """
    config = config or default_settings
    editor_config = config.get_editor_config()

    store = BoxStore(duplicate_offset=editor_config['duplicate_offset'])
    controller = InteractionController(store, min_box_size=editor_config['min_box_size'])
    shortcuts = ShortcutHandler(
        store,
        controller=controller,
        config=editor_config,
        viewport_size=viewport_size
    )
    review = ReviewWorkflow(store, presets=presets)
    auto_detect = AutoDetectService(
        store,
        backend or get_inference_backend(config),
        review,
        pipeline=DetectionPipeline(spatial_config=config.get_spatial_config())
    )
    return EditorSession(
        store=store,
        controller=controller,
        shortcuts=shortcuts,
        review=review,
        auto_detect=auto_detect
    )
