"""
Unit tests for config.settings module.
"""
import pytest
from config.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("INFERENCE_MODEL", raising=False)
        monkeypatch.delenv("MIN_BOX_SIZE", raising=False)

        config = Settings(_env_file=None)

        assert config.inference_model == "ocr"
        assert config.min_box_size == 5
        assert config.database_url == "sqlite:///redaction_presets.db"
        assert config.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("INFERENCE_MODEL", "deepseek-ocr")
        monkeypatch.setenv("min_box_size", "8")
        monkeypatch.setenv("SPATIAL_BELOW_RATIO", "6")

        config = Settings(_env_file=None)

        assert config.inference_model == "deepseek-ocr"
        assert config.min_box_size == 8
        assert config.spatial_below_ratio == 6

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DUPLICATE_OFFSET", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("DUPLICATE_OFFSET=30\n")

        config = Settings(_env_file=env_file)

        assert config.duplicate_offset == 30

    def test_editor_config(self):
        config = Settings(_env_file=None, zoom_step=0.25)

        editor = config.get_editor_config()

        assert editor['zoom_step'] == 0.25
        assert set(editor) == {
            'min_box_size', 'duplicate_offset', 'zoom_step', 'min_zoom', 'max_zoom',
            'pixelation_factor', 'editor_padding', 'min_editor_dimension'
        }

    def test_spatial_config(self):
        config = Settings(_env_file=None, spatial_max_overlap=10)

        assert config.get_spatial_config() == {
            'same_line_ratio': config.spatial_same_line_ratio,
            'below_ratio': config.spatial_below_ratio,
            'max_overlap': 10,
        }

    def test_inference_config(self):
        config = Settings(_env_file=None, inference_temperature=0.2)

        assert config.get_inference_config()['temperature'] == 0.2

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("MIN_BOX_SIZE", "not-a-number")

        with pytest.raises(ValueError):
            Settings(_env_file=None)
