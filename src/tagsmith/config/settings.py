"""
Application settings and configuration management.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from tagsmith import __version__

DEFAULT_IMAGE_EXTENSIONS: list[str] = [
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".bmp",
    ".gif",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="tagsmith")
    app_version: str = Field(default=__version__)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Captions
    tag_separator: str = Field(default=", ")

    # History
    history_limit: int = Field(default=32, ge=1)

    # Scanning
    image_extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_IMAGE_EXTENSIONS)
    )
    include_subdirectories: bool = Field(default=True)
    load_dimensions: bool = Field(default=False)

    # Presets
    preset_file_name: str = Field(default="tag-edit-presets.json")

    @field_validator("image_extensions", mode="before")
    @classmethod
    def parse_image_extensions(cls, v: str | list[str]) -> list[str]:
        """Parse extensions from comma-separated string or list."""
        if isinstance(v, str):
            v = v.split(",")
        normalized = []
        for extension in v:
            extension = extension.strip().lower()
            if not extension:
                continue
            if not extension.startswith("."):
                extension = f".{extension}"
            normalized.append(extension)
        return normalized

    @field_validator("tag_separator")
    @classmethod
    def validate_tag_separator(cls, v: str) -> str:
        """Reject an empty separator, which cannot split a caption."""
        if not v:
            raise ValueError("tag_separator must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_prefix="TAGSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
