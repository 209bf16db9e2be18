"""
Unit tests for data.repositories and data.database modules.
"""
import pytest
from data.database import DatabaseManager
from data.db_models import Preset
from data.repositories import PresetRepository


class TestPresetRepository:
    """Tests for PresetRepository."""

    def test_create_and_get(self, test_db_session):
        repo = PresetRepository(test_db_session, "repo-user")

        preset = repo.create(" Cards ", ["CREDIT_CARD"])

        assert preset.name == "Cards"
        assert repo.get_by_id(preset.id) is preset

    def test_get_scoped_to_user(self, test_db_session):
        preset = PresetRepository(test_db_session, "owner").create("Mine", ["EMAIL"])

        assert PresetRepository(test_db_session, "someone-else").get_by_id(preset.id) is None

    def test_list_oldest_first(self, test_db_session):
        repo = PresetRepository(test_db_session, "ordered-user")
        first = repo.create("First", ["EMAIL"])
        second = repo.create("Second", ["PHONE"])

        assert [p.id for p in repo.list_all()] == [first.id, second.id]

    def test_update(self, test_db_session):
        repo = PresetRepository(test_db_session, "update-user")
        preset = repo.create("Before", ["EMAIL"])

        updated = repo.update(preset.id, categories=["DATE", "LINK"])

        assert updated.name == "Before"
        assert updated.categories == ["DATE", "LINK"]

    def test_update_missing(self, test_db_session):
        assert PresetRepository(test_db_session, "x").update("missing", name="y") is None

    def test_delete(self, test_db_session):
        repo = PresetRepository(test_db_session, "delete-user")
        preset = repo.create("Gone", [])

        assert repo.delete(preset.id)
        assert repo.get_by_id(preset.id) is None
        assert not repo.delete(preset.id)

    def test_categories_normalized(self, test_db_session):
        repo = PresetRepository(test_db_session, "normalize-user")

        preset = repo.create("Contacts", ["email", " Phone ", "EMAIL"])

        assert preset.categories == ["EMAIL", "PHONE"]

    @pytest.mark.parametrize("name,categories", [
        (None, ["EMAIL"]),
        ("", ["EMAIL"]),
        ("ok", "EMAIL"),
        ("ok", ["EMAIL", "SSN"]),
    ])
    def test_validation(self, test_db_session, name, categories):
        with pytest.raises(ValueError):
            PresetRepository(test_db_session, "v").create(name, categories)


class TestDatabaseManager:
    """Tests for DatabaseManager."""

    def test_session_commits(self, db_manager):
        with db_manager.session() as session:
            session.add(Preset(name="Saved", categories=[], user_id="local"))

        with db_manager.session() as session:
            assert session.query(Preset).count() == 1

    def test_session_rolls_back(self, db_manager):
        with pytest.raises(RuntimeError):
            with db_manager.session() as session:
                session.add(Preset(name="Lost", categories=[], user_id="local"))
                session.flush()
                raise RuntimeError("abort")

        with db_manager.session() as session:
            assert session.query(Preset).count() == 0

    def test_drop_tables(self, tmp_path):
        manager = DatabaseManager(f"sqlite:///{tmp_path / 'drop.db'}")
        manager.create_tables()
        manager.drop_tables()
        manager.create_tables()

        with manager.session() as session:
            assert session.query(Preset).count() == 0
        manager.engine.dispose()

    def test_default_url(self):
        manager = DatabaseManager()
        assert manager.database_url == 'sqlite:///redaction_presets.db'
        manager.engine.dispose()
