"""
Box Store - canonical editor state.

Owns the committed box list, the selection, the zoom level, the staged
preview boxes and the snapshot history used for undo/redo.

History model:
- ``history`` is a list of full box-list snapshots (tuples of frozen boxes).
- ``history[history_index]`` is always the current ``boxes``.
- Every box-list mutation truncates history after ``history_index``,
  appends the new snapshot and advances the index.
- ``undo``/``redo`` only move the index.

Listeners registered with ``subscribe`` are called with the store after
every state change.
"""
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from core.constants import EDITOR_CONSTANTS
from core.models import Box, generate_box_id

logger = logging.getLogger(__name__)

Snapshot = Tuple[Box, ...]
Listener = Callable[["BoxStore"], None]


class BoxStore:
    """Explicit store object for one editing session."""

    def __init__(
        self,
        duplicate_offset: float = EDITOR_CONSTANTS['duplicate_offset'],
        id_factory: Callable[[], str] = generate_box_id
    ):
        """
        Initialize an empty store.

        Args:
            duplicate_offset: Offset applied in x and y by duplicate_box
            id_factory: Callable producing fresh unique box ids
        """
        self.duplicate_offset = duplicate_offset
        self._new_id = id_factory
        self._listeners: List[Listener] = []

        self.image: Any = None
        self.pixelated_image: Any = None
        self.original_width = 0
        self.original_height = 0

        self.zoom = 1.0
        self.selected_box_id: Optional[str] = None
        self.preview_boxes: Snapshot = ()

        self.history: List[Snapshot] = [()]
        self.history_index = 0
        self.boxes: Snapshot = ()

        # Bumped whenever the image session is replaced or reset
        self.generation = 0

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_box(self, box_id: Optional[str]) -> Optional[Box]:
        """Find a committed box by id."""
        if box_id is None:
            return None
        for box in self.boxes:
            if box.id == box_id:
                return box
        return None

    @property
    def selected_box(self) -> Optional[Box]:
        return self.get_box(self.selected_box_id)

    @property
    def can_undo(self) -> bool:
        return self._clamped_index() > 0

    @property
    def can_redo(self) -> bool:
        return self._clamped_index() < len(self.history) - 1

    def _clamped_index(self) -> int:
        return max(0, min(self.history_index, len(self.history) - 1))

    # ------------------------------------------------------------------
    # Image session
    # ------------------------------------------------------------------

    def load_image(self, image: Any, pixelated_image: Any, width: int, height: int):
        """
        Start a new editing session on an image.

        Boxes, preview, selection and history are cleared and zoom is
        reset to 100%.
        """
        self.image = image
        self.pixelated_image = pixelated_image
        self.original_width = width
        self.original_height = height
        self.zoom = 1.0
        self._clear_session()
        logger.debug("Loaded image %dx%d", width, height)
        self._notify()

    def reset(self):
        """Clear image, boxes, preview and history to the initial empty snapshot."""
        self.image = None
        self.pixelated_image = None
        self._clear_session()
        self._notify()

    def _clear_session(self):
        self.boxes = ()
        self.preview_boxes = ()
        self.selected_box_id = None
        self.history = [()]
        self.history_index = 0
        self.generation += 1

    def set_zoom(self, zoom: Union[float, Callable[[float], float]]):
        """
        Set the view zoom, either directly or from the previous value.

        Non-positive values are ignored. Range clamping is left to the
        caller (see editor.shortcuts).
        """
        value = zoom(self.zoom) if callable(zoom) else zoom
        if value is None or value <= 0:
            return
        self.zoom = float(value)
        self._notify()

    # ------------------------------------------------------------------
    # Box mutations (each pushes one history snapshot)
    # ------------------------------------------------------------------

    def _push(self, boxes: Sequence[Box], selected_box_id: Optional[str] = ..., **extra):
        snapshot = tuple(boxes)
        index = self._clamped_index()
        self.history = self.history[:index + 1] + [snapshot]
        self.history_index = index + 1
        self.boxes = snapshot
        if selected_box_id is not ...:
            self.selected_box_id = selected_box_id
        for name, value in extra.items():
            setattr(self, name, value)
        self._notify()

    def add_box(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        category=None
    ) -> str:
        """
        Append a new box with a fresh id and select it.

        Callers are responsible for the minimum size check.

        Returns:
            Id of the new box
        """
        box = Box(
            id=self._new_id(),
            x=x,
            y=y,
            width=width,
            height=height,
            category=category
        )
        logger.debug("add_box %s", box)
        self._push(self.boxes + (box,), selected_box_id=box.id)
        return box.id

    def update_box(self, box_id: str, **changes) -> bool:
        """
        Merge ``changes`` into the box with ``box_id``.

        When the id does not exist, or the changes leave the box list
        unchanged, no snapshot is pushed.

        Returns:
            True if a snapshot was pushed
        """
        changed = False
        new_boxes = []
        for box in self.boxes:
            if box.id == box_id:
                updated = box.with_changes(**changes)
                changed = updated != box
                new_boxes.append(updated)
            else:
                new_boxes.append(box)

        if not changed:
            logger.debug("update_box %s: nothing to change", box_id)
            return False

        self._push(new_boxes)
        return True

    def delete_box(self, box_id: str) -> bool:
        """
        Remove a box. Selection is cleared if it pointed at the box.

        Returns:
            True if the box existed
        """
        if self.get_box(box_id) is None:
            return False

        selected = None if self.selected_box_id == box_id else self.selected_box_id
        self._push(
            [box for box in self.boxes if box.id != box_id],
            selected_box_id=selected
        )
        return True

    def duplicate_box(self, box_id: str) -> Optional[str]:
        """
        Clone a box offset by ``duplicate_offset`` and select the clone.

        Returns:
            Id of the clone, or None if ``box_id`` does not exist
        """
        original = self.get_box(box_id)
        if original is None:
            return None

        clone = replace(
            original,
            id=self._new_id(),
            x=original.x + self.duplicate_offset,
            y=original.y + self.duplicate_offset
        )
        self._push(self.boxes + (clone,), selected_box_id=clone.id)
        return clone.id

    def select_box(self, box_id: Optional[str]):
        """Change the selection. Not recorded in history."""
        if box_id is not None and self.get_box(box_id) is None:
            return
        if self.selected_box_id == box_id:
            return
        self.selected_box_id = box_id
        self._notify()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _move_history(self, step: int) -> bool:
        index = self._clamped_index()
        target = index + step
        if target < 0 or target > len(self.history) - 1:
            self.history_index = index
            return False

        self.history_index = target
        self.boxes = self.history[target]
        if self.get_box(self.selected_box_id) is None:
            self.selected_box_id = None
        self._notify()
        return True

    def undo(self) -> bool:
        """Step back one snapshot. No-op at the start of history."""
        return self._move_history(-1)

    def redo(self) -> bool:
        """Step forward one snapshot. No-op at the end of history."""
        return self._move_history(1)

    # ------------------------------------------------------------------
    # Preview staging
    # ------------------------------------------------------------------

    def set_preview_boxes(self, boxes: Sequence[Box]):
        """Replace the staged preview boxes. Not recorded in history."""
        self.preview_boxes = tuple(boxes)
        self._notify()

    def clear_preview_boxes(self):
        """Discard staged preview boxes."""
        if not self.preview_boxes:
            return
        self.preview_boxes = ()
        self._notify()

    def commit_preview_boxes(self) -> List[str]:
        """
        Merge staged boxes into ``boxes`` as a single history step.

        Every committed box receives a fresh id. The stage is cleared.

        Returns:
            Ids of the committed boxes (empty if nothing was staged)
        """
        if not self.preview_boxes:
            return []

        committed = [replace(box, id=self._new_id()) for box in self.preview_boxes]
        logger.debug("Committing %d preview boxes", len(committed))
        self._push(self.boxes + tuple(committed), preview_boxes=())
        return [box.id for box in committed]

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view of the state for renderers."""
        return {
            'boxes': self.boxes,
            'selected_box_id': self.selected_box_id,
            'zoom': self.zoom,
            'preview_boxes': self.preview_boxes,
            'can_undo': self.can_undo,
            'can_redo': self.can_redo,
        }
