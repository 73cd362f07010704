"""
Pytest configuration and fixtures for tagsmith tests.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from tagsmith.config.settings import Settings
from tagsmith.models.image_record import ImageRecord
from tests.factories.image_record_factory import make_images


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults, unaffected by the environment."""
    return Settings(
        tag_separator=", ",
        history_limit=32,
        log_level="INFO",
        debug=False,
    )


@pytest.fixture(autouse=True)
def clean_tagsmith_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TAGSMITH_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("TAGSMITH_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_images() -> list[ImageRecord]:
    """Three records with overlapping tags."""
    return make_images(
        ["1girl", "smile", "cat"],
        ["1girl smiling", "1girl", "outdoors"],
        ["dog", "outdoors", "dog"],
    )


@pytest.fixture
def caption_dir(tmp_path: Path) -> Path:
    """
    A small image directory on disk.

    ``a.png`` and ``sub/c.jpg`` have captions; ``b.png`` has none and
    ``notes.md`` is not an image.
    """
    (tmp_path / "a.png").write_bytes(b"")
    (tmp_path / "a.txt").write_text("1girl, smile, cat", encoding="utf-8")
    (tmp_path / "b.png").write_bytes(b"")
    (tmp_path / "notes.md").write_text("ignore me", encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.jpg").write_bytes(b"")
    (sub / "c.txt").write_text("1girl smiling, 1girl, outdoors", encoding="utf-8")
    return tmp_path
