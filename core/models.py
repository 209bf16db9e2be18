"""
Core domain models for the redaction editor.

These are pure data structures without business logic.
"""
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple


class Category(str, Enum):
    """PII category attached to AI-detected boxes."""
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    CREDIT_CARD = "CREDIT_CARD"
    DATE = "DATE"
    LINK = "LINK"
    NAME = "NAME"
    ADDRESS = "ADDRESS"
    PRICE = "PRICE"
    DEFAULT = "DEFAULT"


def parse_category(value) -> Optional[Category]:
    """Resolve a category name case-insensitively. None if unknown."""
    if isinstance(value, Category):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Category(value.strip().upper())
    except ValueError:
        return None


def generate_box_id() -> str:
    """Generate a unique box id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Box:
    """
    A redaction rectangle in unscaled image space.

    Boxes are immutable so history snapshots can share them safely;
    use ``with_changes`` to derive an updated copy.
    """
    id: str
    x: float
    y: float
    width: float
    height: float
    category: Optional[Category] = None

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    def with_changes(self, **changes) -> "Box":
        """Return a copy with the given fields replaced. The id is kept."""
        changes.pop('id', None)
        return replace(self, **changes)

    def geometry(self) -> "BoxGeometry":
        """Return the geometry part of the box."""
        return BoxGeometry(self.x, self.y, self.width, self.height)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'category': self.category.value if self.category else None
        }


@dataclass(frozen=True)
class BoxGeometry:
    """Position and size of a rectangle without identity."""
    x: float
    y: float
    width: float
    height: float

    def as_changes(self) -> dict:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height
        }


@dataclass
class RawRegion:
    """
    A region as emitted by the vision model.

    ``coords`` is either an axis-aligned box ``[x1, y1, x2, y2]`` or a
    quadrilateral ``[x1, y1, x2, y2, x3, y3, x4, y4]``.
    """
    label: str
    coords: List[float]
    score: Optional[float] = None


@dataclass
class DetectedBox:
    """An axis-aligned detection with its recognized text and category."""
    label: str
    box: Tuple[float, float, float, float]  # xmin, ymin, xmax, ymax
    category: Category = Category.DEFAULT
    score: Optional[float] = None

    @property
    def width(self) -> float:
        return self.box[2] - self.box[0]

    @property
    def height(self) -> float:
        return self.box[3] - self.box[1]

    @property
    def center_y(self) -> float:
        return (self.box[1] + self.box[3]) / 2

    def to_box(self, box_id: Optional[str] = None) -> Box:
        """Convert to an editor box carrying the detection category."""
        x1, y1, x2, y2 = self.box
        return Box(
            id=box_id or generate_box_id(),
            x=x1,
            y=y1,
            width=x2 - x1,
            height=y2 - y1,
            category=self.category
        )


@dataclass
class PresetRecord:
    """A named category selection as returned by the preset service."""
    id: str
    name: str
    categories: List[str] = field(default_factory=list)
