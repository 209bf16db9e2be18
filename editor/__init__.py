"""Editor package - Box store, pointer interaction and keyboard shortcuts."""

from .store import BoxStore
from .interaction import (
    InteractionController,
    InteractionMode,
    PointerEvent,
    HitTarget
)
from .shortcuts import (
    ShortcutHandler,
    zoom_in,
    zoom_out,
    zoom_reset,
    fit_to_screen
)

__all__ = [
    'BoxStore',
    'InteractionController',
    'InteractionMode',
    'PointerEvent',
    'HitTarget',
    'ShortcutHandler',
    'zoom_in',
    'zoom_out',
    'zoom_reset',
    'fit_to_screen'
]
