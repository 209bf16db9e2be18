"""
Keyboard affordances and zoom controls.

Box edits act on the selected box only and go through the store, so
each key press is one undoable step.
"""
from typing import Optional

from core.constants import EDITOR_CONSTANTS, NUDGE_STEP, NUDGE_STEP_LARGE
from editor.interaction import InteractionController, InteractionMode
from editor.store import BoxStore
from utils.geometry import clamp_zoom, fit_zoom

ARROW_KEYS = {
    'ArrowUp': (0, -1),
    'ArrowDown': (0, 1),
    'ArrowLeft': (-1, 0),
    'ArrowRight': (1, 0),
}

DELETE_KEYS = ('Delete', 'Backspace')


def zoom_in(store: BoxStore, config: Optional[dict] = None):
    config = config or EDITOR_CONSTANTS
    store.set_zoom(lambda z: clamp_zoom(z + config['zoom_step'], config['min_zoom'], config['max_zoom']))


def zoom_out(store: BoxStore, config: Optional[dict] = None):
    config = config or EDITOR_CONSTANTS
    store.set_zoom(lambda z: clamp_zoom(z - config['zoom_step'], config['min_zoom'], config['max_zoom']))


def zoom_reset(store: BoxStore):
    store.set_zoom(1.0)


def fit_to_screen(
    store: BoxStore,
    container_width: float,
    container_height: float,
    config: Optional[dict] = None
) -> bool:
    """
    Zoom so the loaded image fits the container.

    Returns:
        True if the zoom was changed
    """
    config = config or EDITOR_CONSTANTS
    zoom = fit_zoom(
        container_width,
        container_height,
        store.original_width,
        store.original_height,
        padding=config['editor_padding'],
        min_dimension=config['min_editor_dimension']
    )
    if zoom is None:
        return False
    store.set_zoom(zoom)
    return True


class ShortcutHandler:
    """Maps key presses onto store operations."""

    def __init__(
        self,
        store: BoxStore,
        controller: Optional[InteractionController] = None,
        config: Optional[dict] = None,
        viewport_size=None
    ):
        """
        Args:
            store: Store to act on
            controller: When given, box edits are ignored mid-gesture
            config: Editor constants (zoom step/limits, padding)
            viewport_size: Callable returning (width, height) for zoom-to-fit
        """
        self.store = store
        self.controller = controller
        self.config = config or EDITOR_CONSTANTS
        self.viewport_size = viewport_size

    def _gesture_active(self) -> bool:
        return self.controller is not None and self.controller.mode is not InteractionMode.IDLE

    def handle_key(
        self,
        key: str,
        shift: bool = False,
        ctrl: bool = False,
        meta: bool = False
    ) -> bool:
        """
        Handle one key press.

        Returns:
            True if the key was consumed
        """
        if ctrl or meta:
            return self._handle_command(key, shift)

        if key in ARROW_KEYS:
            return self._nudge(key, shift)

        if key in DELETE_KEYS:
            box_id = self.store.selected_box_id
            if box_id is None or self._gesture_active():
                return False
            return self.store.delete_box(box_id)

        if key == 'Escape':
            if self.store.selected_box_id is None:
                return False
            self.store.select_box(None)
            return True

        return False

    def _handle_command(self, key: str, shift: bool) -> bool:
        key = key.lower()
        if key in ('=', '+'):
            zoom_in(self.store, self.config)
        elif key == '-':
            zoom_out(self.store, self.config)
        elif key == '0':
            if self.viewport_size is None:
                return False
            width, height = self.viewport_size()
            fit_to_screen(self.store, width, height, self.config)
        elif key == '1':
            zoom_reset(self.store)
        elif key == 'z' and not shift:
            self.store.undo()
        elif (key == 'z' and shift) or key == 'y':
            self.store.redo()
        elif key == 'd':
            box_id = self.store.selected_box_id
            if box_id is None or self._gesture_active():
                return False
            self.store.duplicate_box(box_id)
        else:
            return False
        return True

    def _nudge(self, key: str, shift: bool) -> bool:
        box = self.store.selected_box
        if box is None or self._gesture_active():
            return False

        step = NUDGE_STEP_LARGE if shift else NUDGE_STEP
        dx, dy = ARROW_KEYS[key]
        self.store.update_box(box.id, x=box.x + dx * step, y=box.y + dy * step)
        return True
