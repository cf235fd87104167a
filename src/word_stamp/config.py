"""Configuration management for Word Stamp."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration via environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Word lists and placeholders
    marker: str = Field(default="!{word}", alias="WORD_STAMP_MARKER")
    delimiter: str = Field(default=",", alias="WORD_STAMP_DELIMITER")

    # Output naming
    archive_folder: str = Field(default="images", alias="WORD_STAMP_ARCHIVE_FOLDER")
    single_filename: str = Field(
        default="content.png",
        alias="WORD_STAMP_SINGLE_FILENAME",
    )
    archive_filename: str = Field(
        default="content_images.zip",
        alias="WORD_STAMP_ARCHIVE_FILENAME",
    )

    # Capture settings
    capture_scale: float = Field(default=2.0, gt=0, alias="WORD_STAMP_SCALE")
    surface_width: int = Field(default=500, gt=0, alias="WORD_STAMP_WIDTH")
    surface_height: int = Field(default=300, gt=0, alias="WORD_STAMP_HEIGHT")
    capture_attempts: int = Field(
        default=1,
        ge=1,
        alias="WORD_STAMP_CAPTURE_ATTEMPTS",
    )

    # Base text style
    default_color: str = Field(default="#000000", alias="WORD_STAMP_COLOR")
    default_font_weight: int = Field(default=400, alias="WORD_STAMP_FONT_WEIGHT")
    default_font_family: str = Field(default="Arial", alias="WORD_STAMP_FONT_FAMILY")
    default_font_size: int = Field(default=20, gt=0, alias="WORD_STAMP_FONT_SIZE")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load settings from an optional specific .env file."""
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
