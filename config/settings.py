"""
Configuration management using Pydantic Settings.

Environment variables (case-insensitive):
- INFERENCE_API_KEY: API key for the vision model server
- INFERENCE_SERVER_URL: Base URL for the vision model server
- INFERENCE_MODEL: Served model name
- DATABASE_URL: SQLAlchemy database URL for presets
- MIN_BOX_SIZE, DUPLICATE_OFFSET, ZOOM_STEP, ...: editor tuning
- SPATIAL_SAME_LINE_RATIO, SPATIAL_BELOW_RATIO, SPATIAL_MAX_OVERLAP: key/value tuning
- LOG_LEVEL: Logging level for the CLI
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import (
    DEFAULT_INFERENCE_PARAMS,
    EDITOR_CONSTANTS,
    SPATIAL_THRESHOLDS
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Inference Configuration
    inference_api_key: str = Field(default="123")
    inference_server_url: str = Field(default="http://localhost:8000/v1")
    inference_model: str = Field(default="ocr")
    inference_fallback_model: str = Field(default="")
    inference_max_tokens: int = Field(default=DEFAULT_INFERENCE_PARAMS['max_tokens'])
    inference_temperature: float = Field(default=DEFAULT_INFERENCE_PARAMS['temperature'])
    inference_max_image_size: int = Field(default=DEFAULT_INFERENCE_PARAMS['max_image_size'])

    # Database Configuration
    database_url: str = Field(default="sqlite:///redaction_presets.db")

    # Editor
    min_box_size: float = Field(default=EDITOR_CONSTANTS['min_box_size'])
    duplicate_offset: float = Field(default=EDITOR_CONSTANTS['duplicate_offset'])
    zoom_step: float = Field(default=EDITOR_CONSTANTS['zoom_step'])
    min_zoom: float = Field(default=EDITOR_CONSTANTS['min_zoom'])
    max_zoom: float = Field(default=EDITOR_CONSTANTS['max_zoom'])
    pixelation_factor: float = Field(default=EDITOR_CONSTANTS['pixelation_factor'])
    editor_padding: int = Field(default=EDITOR_CONSTANTS['editor_padding'])
    min_editor_dimension: int = Field(default=EDITOR_CONSTANTS['min_editor_dimension'])

    # Spatial key/value matching
    spatial_same_line_ratio: float = Field(default=SPATIAL_THRESHOLDS['same_line_ratio'])
    spatial_below_ratio: float = Field(default=SPATIAL_THRESHOLDS['below_ratio'])
    spatial_max_overlap: float = Field(default=SPATIAL_THRESHOLDS['max_overlap'])

    # Logging
    log_level: str = Field(default="INFO")

    def get_editor_config(self) -> dict:
        """Get editor tuning as dictionary."""
        return {
            'min_box_size': self.min_box_size,
            'duplicate_offset': self.duplicate_offset,
            'zoom_step': self.zoom_step,
            'min_zoom': self.min_zoom,
            'max_zoom': self.max_zoom,
            'pixelation_factor': self.pixelation_factor,
            'editor_padding': self.editor_padding,
            'min_editor_dimension': self.min_editor_dimension,
        }

    def get_spatial_config(self) -> dict:
        """Get spatial key/value thresholds as dictionary."""
        return {
            'same_line_ratio': self.spatial_same_line_ratio,
            'below_ratio': self.spatial_below_ratio,
            'max_overlap': self.spatial_max_overlap,
        }

    def get_inference_config(self) -> dict:
        """Get inference parameters as dictionary."""
        return {
            'max_tokens': self.inference_max_tokens,
            'temperature': self.inference_temperature,
            'max_image_size': self.inference_max_image_size,
        }


# Global settings instance
settings = Settings()
