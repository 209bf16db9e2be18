"""
Interaction Controller - pointer gestures to store mutations.

State machine:
    IDLE -> DRAWING  -> IDLE   (draw a new box on the canvas background)
    IDLE -> DRAGGING -> IDLE   (move a box, or clone it with Alt/Meta held)
    IDLE -> RESIZING -> IDLE   (drag one of the selected box's corner handles)

Pointer-move events only update transient geometry. Each gesture ends
with at most one store call (add_box or update_box), so a drag produces
a single history snapshot. Leaving the canvas resolves the gesture the
same way as releasing the pointer.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from core.constants import EDITOR_CONSTANTS, HANDLE_RADIUS, RESIZE_HANDLES
from core.models import Box, BoxGeometry
from editor.store import BoxStore
from utils.geometry import (
    Point,
    contains_point,
    corner_points,
    rect_from_points,
    resize_rect,
    to_image_space
)

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    """Gesture currently in progress."""
    IDLE = "idle"
    DRAWING = "drawing"
    DRAGGING = "dragging"
    RESIZING = "resizing"


@dataclass
class PointerEvent:
    """A pointer event in screen coordinates."""
    client_x: float
    client_y: float
    alt_key: bool = False
    meta_key: bool = False
    shift_key: bool = False

    @property
    def position(self) -> Tuple[float, float]:
        return self.client_x, self.client_y


@dataclass(frozen=True)
class HitTarget:
    """What a pointer-down landed on."""
    kind: str  # 'canvas', 'box' or 'handle'
    box_id: Optional[str] = None
    handle: Optional[str] = None

    @classmethod
    def canvas(cls) -> "HitTarget":
        return cls('canvas')

    @classmethod
    def on_box(cls, box_id: str) -> "HitTarget":
        return cls('box', box_id=box_id)

    @classmethod
    def on_handle(cls, box_id: str, handle: str) -> "HitTarget":
        return cls('handle', box_id=box_id, handle=handle)


class InteractionController:
    """Drives draw/move/clone/resize gestures against a BoxStore."""

    def __init__(
        self,
        store: BoxStore,
        min_box_size: float = EDITOR_CONSTANTS['min_box_size'],
        handle_radius: float = HANDLE_RADIUS,
        container_origin: Tuple[float, float] = (0.0, 0.0)
    ):
        """
        Initialize controller.

        Args:
            store: Store receiving committed mutations
            min_box_size: Minimum width/height for drawn and resized boxes
            handle_radius: Resize handle hit radius in screen pixels
            container_origin: Screen position of the canvas top-left
        """
        self.store = store
        self.min_box_size = min_box_size
        self.handle_radius = handle_radius
        self.container_origin = container_origin

        self.mode = InteractionMode.IDLE
        self._reset_gesture()

    def _reset_gesture(self):
        self._zoom = None
        self._origin = None
        self._start: Optional[Point] = None
        self._box_id: Optional[str] = None
        self._handle: Optional[str] = None
        self._initial: Optional[Box] = None
        self.is_cloning = False
        self.draft: Optional[BoxGeometry] = None
        self.active_geometry: Optional[BoxGeometry] = None

    # ------------------------------------------------------------------
    # Transient render state
    # ------------------------------------------------------------------

    @property
    def ghost(self) -> Optional[BoxGeometry]:
        """Original geometry shown dimmed while a clone is dragged."""
        if self.mode is InteractionMode.DRAGGING and self.is_cloning and self._initial:
            return self._initial.geometry()
        return None

    def rendered_geometry(self, box: Box) -> BoxGeometry:
        """Geometry to render for ``box``, including any in-flight gesture."""
        if self.active_geometry is not None and box.id == self._box_id and not self.is_cloning:
            return self.active_geometry
        return box.geometry()

    # ------------------------------------------------------------------
    # Coordinate mapping and hit testing
    # ------------------------------------------------------------------

    def set_container_origin(self, origin: Tuple[float, float]):
        """Update the canvas origin. Takes effect from the next gesture."""
        self.container_origin = origin

    def _image_point(self, event: PointerEvent) -> Point:
        zoom = self._zoom if self._zoom is not None else self.store.zoom
        origin = self._origin if self._origin is not None else self.container_origin
        return to_image_space(event.position, origin, zoom)

    def hit_test(self, point: Tuple[float, float]) -> HitTarget:
        """
        Find what lies under an image-space point.

        Handles of the selected box win, then the topmost (last added)
        box containing the point, then the canvas background.
        """
        zoom = self.store.zoom or 1.0
        radius = self.handle_radius / zoom

        selected = self.store.selected_box
        if selected is not None:
            for handle, corner in corner_points(self._geometry_tuple(selected)).items():
                if abs(point[0] - corner.x) <= radius and abs(point[1] - corner.y) <= radius:
                    return HitTarget.on_handle(selected.id, handle)

        for box in reversed(self.store.boxes):
            if contains_point(self._geometry_tuple(box), point):
                return HitTarget.on_box(box.id)

        return HitTarget.canvas()

    @staticmethod
    def _geometry_tuple(box: Box) -> Tuple[float, float, float, float]:
        return box.x, box.y, box.width, box.height

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, event: PointerEvent, target: Optional[HitTarget] = None):
        """
        Start a gesture.

        Args:
            event: Pointer event in screen coordinates
            target: What was hit; computed with hit_test when omitted
        """
        # A press during an open gesture resolves it where it was last moved
        if self.mode is not InteractionMode.IDLE:
            self.pointer_up()

        # Zoom and origin are fixed for the whole gesture
        self._zoom = self.store.zoom
        self._origin = self.container_origin
        self._start = self._image_point(event)

        if target is None:
            target = self.hit_test(self._start)

        if target.kind == 'handle' and target.handle in RESIZE_HANDLES:
            self._begin_resize(target.box_id, target.handle)
        elif target.kind == 'box':
            self._begin_drag(target.box_id, clone=event.alt_key or event.meta_key)
        else:
            self._begin_draw()

        if self.mode is InteractionMode.IDLE:
            self._reset_gesture()

    def _begin_draw(self):
        self.store.select_box(None)
        self.mode = InteractionMode.DRAWING
        self.draft = BoxGeometry(self._start.x, self._start.y, 0.0, 0.0)

    def _begin_drag(self, box_id: str, clone: bool):
        box = self.store.get_box(box_id)
        if box is None:
            return
        self.store.select_box(box_id)
        self._box_id = box_id
        self._initial = box
        self.is_cloning = clone
        self.active_geometry = box.geometry()
        self.mode = InteractionMode.DRAGGING

    def _begin_resize(self, box_id: str, handle: str):
        box = self.store.get_box(box_id)
        if box is None:
            return
        self.store.select_box(box_id)
        self._box_id = box_id
        self._handle = handle
        self._initial = box
        self.active_geometry = box.geometry()
        self.mode = InteractionMode.RESIZING

    def pointer_move(self, event: PointerEvent):
        """Update transient geometry for the gesture in progress."""
        if self.mode is InteractionMode.IDLE:
            return

        current = self._image_point(event)
        dx = current.x - self._start.x
        dy = current.y - self._start.y

        if self.mode is InteractionMode.DRAWING:
            self.draft = BoxGeometry(*rect_from_points(self._start, current))
        elif self.mode is InteractionMode.DRAGGING:
            initial = self._initial
            self.active_geometry = BoxGeometry(
                initial.x + dx, initial.y + dy, initial.width, initial.height
            )
        elif self.mode is InteractionMode.RESIZING:
            initial = self._initial
            self.active_geometry = BoxGeometry(*resize_rect(
                (initial.x, initial.y, initial.width, initial.height),
                self._handle,
                dx,
                dy,
                self.min_box_size
            ))

    def pointer_up(self, event: Optional[PointerEvent] = None):
        """
        Resolve the gesture in progress.

        Args:
            event: Final pointer position, applied as a last move if given
        """
        if self.mode is InteractionMode.IDLE:
            return
        if event is not None:
            self.pointer_move(event)

        mode = self.mode
        try:
            if mode is InteractionMode.DRAWING:
                self._commit_draw()
            elif mode is InteractionMode.DRAGGING:
                self._commit_drag()
            elif mode is InteractionMode.RESIZING:
                self.store.update_box(self._box_id, **self.active_geometry.as_changes())
        finally:
            self.mode = InteractionMode.IDLE
            self._reset_gesture()

    def pointer_leave(self, event: Optional[PointerEvent] = None):
        """Pointer left the canvas: resolve like pointer_up."""
        self.pointer_up(event)

    def _commit_draw(self):
        draft = self.draft
        if draft is None:
            return
        if draft.width > self.min_box_size and draft.height > self.min_box_size:
            self.store.add_box(draft.x, draft.y, draft.width, draft.height)
        else:
            logger.debug("Discarding %.1fx%.1f draw gesture", draft.width, draft.height)

    def _commit_drag(self):
        geometry = self.active_geometry
        if self.is_cloning:
            self.store.add_box(
                geometry.x,
                geometry.y,
                geometry.width,
                geometry.height,
                category=self._initial.category
            )
        else:
            self.store.update_box(self._box_id, x=geometry.x, y=geometry.y)
