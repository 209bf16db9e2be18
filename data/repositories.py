"""
Repository pattern for preset data access.

Provides clean separation between data access and business logic.
"""
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from core.models import parse_category
from data.db_models import Preset, utcnow


def _validate(name: Optional[str], categories: Optional[Sequence[str]]):
    if name is not None and not name.strip():
        raise ValueError("Preset name must not be empty")
    if categories is not None and not isinstance(categories, (list, tuple)):
        raise ValueError("Preset categories must be a list")


def _normalize_categories(categories: Sequence[str]) -> List[str]:
    """Canonical category names, in order, without duplicates."""
    normalized = []
    for value in categories:
        category = parse_category(value)
        if category is None:
            raise ValueError(f"Unknown category: {value!r}")
        if category.value not in normalized:
            normalized.append(category.value)
    return normalized


class PresetRepository:
    """Repository for Preset operations, scoped to one user."""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def list_all(self) -> List[Preset]:
        """List the user's presets, oldest first."""
        return self.session.query(Preset)\
            .filter(Preset.user_id == self.user_id)\
            .order_by(Preset.created_at)\
            .all()

    def get_by_id(self, preset_id: str) -> Optional[Preset]:
        """Get one of the user's presets by ID."""
        return self.session.query(Preset).filter(
            Preset.id == preset_id,
            Preset.user_id == self.user_id
        ).first()

    def create(self, name: str, categories: Sequence[str]) -> Preset:
        """Create a new preset."""
        if name is None:
            raise ValueError("Preset name is required")
        _validate(name, categories)
        preset = Preset(
            name=name.strip(),
            categories=_normalize_categories(categories),
            user_id=self.user_id
        )
        self.session.add(preset)
        self.session.commit()
        self.session.refresh(preset)
        return preset

    def update(
        self,
        preset_id: str,
        name: Optional[str] = None,
        categories: Optional[Sequence[str]] = None
    ) -> Optional[Preset]:
        """Update name and/or categories. Returns None if not found."""
        _validate(name, categories)
        preset = self.get_by_id(preset_id)
        if preset is None:
            return None
        if name is not None:
            preset.name = name.strip()
        if categories is not None:
            preset.categories = _normalize_categories(categories)
        preset.updated_at = utcnow()
        self.session.commit()
        self.session.refresh(preset)
        return preset

    def delete(self, preset_id: str) -> bool:
        """Delete a preset."""
        preset = self.get_by_id(preset_id)
        if preset:
            self.session.delete(preset)
            self.session.commit()
            return True
        return False
