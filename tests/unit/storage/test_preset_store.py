"""
Tests for preset pair file persistence.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tagsmith.exceptions import PresetFileError
from tagsmith.models.tag_pair import AbstractTagPair
from tagsmith.storage.preset_store import (
    PRESET_FILE_NAME,
    load_preset_pairs,
    save_preset_pairs,
)


class TestPresetStore:
    """Tests for loading and saving presets."""

    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        assert load_preset_pairs(tmp_path) == []

    def test_save_writes_camel_case_json(self, tmp_path: Path) -> None:
        pairs = [
            AbstractTagPair(abstract_tag="dog", concrete_tag="big dog"),
            AbstractTagPair(abstract_tag=" cat", concrete_tag="black cat"),
        ]
        path = save_preset_pairs(tmp_path, pairs)
        assert path.name == PRESET_FILE_NAME
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "version": 1,
            "pairs": [
                {"abstractTag": "cat", "concreteTag": "black cat"},
                {"abstractTag": "dog", "concreteTag": "big dog"},
            ],
        }

    def test_round_trip(self, tmp_path: Path) -> None:
        pairs = [AbstractTagPair(abstract_tag="cat", concrete_tag="black cat")]
        save_preset_pairs(tmp_path, pairs, "custom.json")
        assert load_preset_pairs(tmp_path, "custom.json") == pairs

    def test_load_normalizes(self, tmp_path: Path) -> None:
        (tmp_path / PRESET_FILE_NAME).write_text(
            json.dumps(
                {
                    "version": 1,
                    "pairs": [
                        {"abstractTag": "x", "concreteTag": "x"},
                        {"abstractTag": " a ", "concreteTag": "a b"},
                    ],
                }
            ),
            encoding="utf-8",
        )
        assert [pair.key for pair in load_preset_pairs(tmp_path)] == [("a", "a b")]

    @pytest.mark.parametrize(
        "content",
        ["{not json", '{"version": 2, "pairs": []}', '{"version": 1, "pairs": [{}]}'],
    )
    def test_invalid_file_loads_empty(self, tmp_path: Path, content: str) -> None:
        (tmp_path / PRESET_FILE_NAME).write_text(content, encoding="utf-8")
        assert load_preset_pairs(tmp_path) == []

    def test_save_failure_raises(self, tmp_path: Path) -> None:
        with pytest.raises(PresetFileError):
            save_preset_pairs(tmp_path / "missing", [])
