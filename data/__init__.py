"""Data access layer - Preset models, connections and repositories."""

from .db_models import Base, Preset
from .database import DatabaseManager
from .repositories import PresetRepository

__all__ = [
    # Models
    'Base',
    'Preset',

    # Database
    'DatabaseManager',

    # Repositories
    'PresetRepository'
]
