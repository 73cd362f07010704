"""
Tests for settings configuration.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tagsmith import __version__
from tagsmith.config.settings import DEFAULT_IMAGE_EXTENSIONS, Settings, get_settings


def test_settings_defaults(test_settings: Settings) -> None:
    """Test default settings values."""
    assert test_settings.app_name == "tagsmith"
    assert test_settings.app_version == __version__
    assert test_settings.tag_separator == ", "
    assert test_settings.history_limit == 32
    assert test_settings.image_extensions == DEFAULT_IMAGE_EXTENSIONS
    assert test_settings.include_subdirectories is True
    assert test_settings.load_dimensions is False
    assert test_settings.preset_file_name == "tag-edit-presets.json"


def test_image_extensions_from_string() -> None:
    """Extensions may be given as a comma-separated string."""
    settings = Settings(image_extensions="PNG, .jpg,,webp")
    assert settings.image_extensions == [".png", ".jpg", ".webp"]


def test_image_extensions_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """The environment variable is parsed the same way."""
    monkeypatch.setenv("TAGSMITH_IMAGE_EXTENSIONS", "png,gif")
    assert get_settings().image_extensions == [".png", ".gif"]


def test_separator_and_history_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TAGSMITH_TAG_SEPARATOR", "|")
    monkeypatch.setenv("TAGSMITH_HISTORY_LIMIT", "5")
    settings = get_settings()
    assert settings.tag_separator == "|"
    assert settings.history_limit == 5


def test_empty_separator_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(tag_separator="")


def test_history_limit_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(history_limit=0)


def test_log_level_validation() -> None:
    """Test log level validation."""
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="LOUD")
