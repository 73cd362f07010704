"""
Preset pair file persistence.

Presets live in a JSON file at the root of the image directory::

    {"version": 1, "pairs": [{"abstractTag": "...", "concreteTag": "..."}]}

Pairs are normalized on both load and save.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from uuid import uuid4

from pydantic import ValidationError

from tagsmith.exceptions import PresetFileError
from tagsmith.models.tag_pair import AbstractTagPair, TagPresetFile
from tagsmith.services.preset_pairs import normalize_pairs

logger = logging.getLogger(__name__)

PRESET_FILE_NAME = "tag-edit-presets.json"


def load_preset_pairs(
    root: Path, file_name: str = PRESET_FILE_NAME
) -> list[AbstractTagPair]:
    """
    Load preset pairs from *root*.

    A missing, unreadable, malformed or wrong-version file loads as an
    empty list.
    """
    path = root / file_name
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError:
        logger.warning("Could not read preset file %s", path, exc_info=True)
        return []
    try:
        data = TagPresetFile.model_validate_json(text)
    except ValidationError as e:
        logger.warning("Ignoring invalid preset file %s: %s", path, e.error_count())
        return []
    return normalize_pairs(data.pairs)


def save_preset_pairs(
    root: Path,
    pairs: Iterable[AbstractTagPair],
    file_name: str = PRESET_FILE_NAME,
) -> Path:
    """
    Normalize *pairs* and write them to the preset file in *root*.

    Raises
    ------
    PresetFileError
        If the file cannot be written.
    """
    path = root / file_name
    data = TagPresetFile(version=1, pairs=normalize_pairs(pairs))
    tmp_path = path.with_name(f".{path.stem}.tmp.{uuid4()}")
    try:
        tmp_path.write_text(
            data.model_dump_json(indent=2, by_alias=True), encoding="utf-8"
        )
        tmp_path.replace(path)
    except OSError as e:
        logger.error("Failed to save preset file %s", path, exc_info=True)
        tmp_path.unlink(missing_ok=True)
        raise PresetFileError(path) from e
    logger.info("Saved %d preset pairs to %s", len(data.pairs), path)
    return path
