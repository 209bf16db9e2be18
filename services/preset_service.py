"""
Preset Service - named category selections for the review workflow.

Wraps the preset repository in short-lived sessions and returns plain
PresetRecord values so callers never hold ORM objects.
"""
from typing import List, Optional, Sequence

from core.models import PresetRecord
from data.database import DatabaseManager
from data.db_models import Preset
from data.repositories import PresetRepository


def _to_record(preset: Preset) -> PresetRecord:
    return PresetRecord(
        id=preset.id,
        name=preset.name,
        categories=list(preset.categories or [])
    )


class PresetService:
    """Preset CRUD for a single user."""

    def __init__(self, db_manager: DatabaseManager, user_id: str = "local"):
        """
        Initialize preset service.

        Args:
            db_manager: Database manager providing sessions
            user_id: Owner of the presets
        """
        self.db_manager = db_manager
        self.user_id = user_id

    def list_presets(self) -> List[PresetRecord]:
        with self.db_manager.session() as session:
            repo = PresetRepository(session, self.user_id)
            return [_to_record(preset) for preset in repo.list_all()]

    def create_preset(self, name: str, categories: Sequence[str]) -> PresetRecord:
        with self.db_manager.session() as session:
            repo = PresetRepository(session, self.user_id)
            return _to_record(repo.create(name, categories))

    def update_preset(
        self,
        preset_id: str,
        name: Optional[str] = None,
        categories: Optional[Sequence[str]] = None
    ) -> Optional[PresetRecord]:
        with self.db_manager.session() as session:
            repo = PresetRepository(session, self.user_id)
            preset = repo.update(preset_id, name=name, categories=categories)
            return _to_record(preset) if preset else None

    def delete_preset(self, preset_id: str) -> bool:
        with self.db_manager.session() as session:
            return PresetRepository(session, self.user_id).delete(preset_id)
