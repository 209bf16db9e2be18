"""
Unit tests for data.db_models module.
"""
import pytest
from datetime import datetime
from data.db_models import Preset


class TestPreset:
    """Tests for Preset model."""

    def test_create_preset(self, test_db_session):
        """Test creating a preset."""
        preset = Preset(
            name="Contacts",
            categories=["EMAIL", "PHONE"],
            user_id="local"
        )

        test_db_session.add(preset)
        test_db_session.commit()

        assert preset.id is not None
        assert preset.name == "Contacts"
        assert preset.categories == ["EMAIL", "PHONE"]

    def test_preset_timestamps(self, test_db_session):
        """Test created_at and updated_at are set."""
        preset = Preset(name="Dates", categories=["DATE"], user_id="local")

        test_db_session.add(preset)
        test_db_session.commit()

        assert isinstance(preset.created_at, datetime)
        assert isinstance(preset.updated_at, datetime)

    def test_categories_default(self, test_db_session):
        preset = Preset(name="Empty", user_id="local")

        test_db_session.add(preset)
        test_db_session.commit()

        assert preset.categories == []

    def test_to_dict(self, test_db_session):
        """Test conversion to dictionary."""
        preset = Preset(name="Prices", categories=["PRICE"], user_id="u1")
        test_db_session.add(preset)
        test_db_session.commit()

        data = preset.to_dict()

        assert data['id'] == preset.id
        assert data['name'] == "Prices"
        assert data['categories'] == ["PRICE"]
        assert data['user_id'] == "u1"
        assert data['created_at'] is not None

    def test_repr(self):
        preset = Preset(id="p1", name="Names", categories=["NAME"], user_id="local")
        assert "Names" in repr(preset)
