"""
Unit tests for cli_workflow module.
"""
import asyncio
import sys

import pytest
from PIL import Image

import cli_workflow
from config.settings import Settings
from core.models import RawRegion
from services.factory import create_editor_session
from services.inference_service import BaseInferenceBackend


class StaticBackend(BaseInferenceBackend):
    async def _load(self, fallback, on_progress):
        pass

    async def _infer(self, image):
        return [
            RawRegion(label="john@example.com", coords=[0, 0, 100, 50]),
            RawRegion(label="Hello", coords=[100, 50, 200, 100]),
        ]


@pytest.fixture
def offline_session(monkeypatch):
    def factory(config):
        return create_editor_session(Settings(_env_file=None), backend=StaticBackend())

    monkeypatch.setattr(cli_workflow, "create_editor_session", factory)


@pytest.fixture
def temp_db(monkeypatch, tmp_path):
    monkeypatch.setattr(cli_workflow.settings, "database_url", f"sqlite:///{tmp_path / 'cli.db'}")


class TestDetectCli:
    """Tests for the detect command."""

    def test_detect_and_export(self, offline_session, sample_image_path, tmp_path):
        output = tmp_path / "out.png"
        annotated = tmp_path / "review.png"

        result = asyncio.run(cli_workflow.detect_cli(
            sample_image_path,
            output_path=str(output),
            annotate_path=str(annotated)
        ))

        assert result == str(output)
        assert Image.open(output).size == (200, 100)
        assert annotated.exists()

    def test_category_filter(self, offline_session, sample_image_path, tmp_path, capsys):
        output = tmp_path / "out.png"

        asyncio.run(cli_workflow.detect_cli(
            sample_image_path, output_path=str(output), categories=["EMAIL"]
        ))

        out = capsys.readouterr().out
        assert "Redacting 1 boxes" in out

    def test_category_filter_case_insensitive(self, offline_session, sample_image_path, tmp_path, capsys):
        output = tmp_path / "out.png"

        result = asyncio.run(cli_workflow.detect_cli(
            sample_image_path, output_path=str(output), categories=["email"]
        ))

        assert result == str(output)
        assert "Redacting 1 boxes" in capsys.readouterr().out

    def test_nothing_selected(self, offline_session, sample_image_path, tmp_path):
        output = tmp_path / "out.png"

        result = asyncio.run(cli_workflow.detect_cli(
            sample_image_path, output_path=str(output), categories=["PRICE"]
        ))

        assert result is None
        assert not output.exists()

    def test_missing_file(self, tmp_path, capsys):
        result = asyncio.run(cli_workflow.detect_cli(str(tmp_path / "nope.png")))

        assert result is None
        assert "File not found" in capsys.readouterr().out


class TestPresetCli:
    """Tests for preset commands."""

    def test_save_list_delete(self, temp_db, capsys):
        preset = cli_workflow.save_preset_cli("Contacts", ["EMAIL", "PHONE"])

        cli_workflow.list_presets_cli()
        assert "Contacts" in capsys.readouterr().out

        cli_workflow.delete_preset_cli(preset.id)
        cli_workflow.list_presets_cli()
        assert "No presets found." in capsys.readouterr().out

    def test_save_unknown_category(self, temp_db, capsys):
        assert cli_workflow.save_preset_cli("Bad", ["EMAIL", "SSN"]) is None
        assert "Unknown category" in capsys.readouterr().out

        cli_workflow.list_presets_cli()
        assert "No presets found." in capsys.readouterr().out

    def test_save_normalizes_categories(self, temp_db):
        preset = cli_workflow.save_preset_cli("Contacts", ["email", "phone"])
        assert preset.categories == ["EMAIL", "PHONE"]

    def test_init_db_drop_existing(self, temp_db, monkeypatch, capsys):
        cli_workflow.save_preset_cli("Old", ["EMAIL"])
        monkeypatch.setattr(sys, "argv", ["cli_workflow.py", "init-db", "--drop-existing"])

        cli_workflow.main()
        cli_workflow.list_presets_cli()

        out = capsys.readouterr().out
        assert "Dropping existing tables" in out
        assert "No presets found." in out

    def test_main_dispatch(self, temp_db, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["cli_workflow.py", "init-db"])

        cli_workflow.main()

        assert "Database initialized" in capsys.readouterr().out
