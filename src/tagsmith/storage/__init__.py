"""
File-system collaborators for tagsmith.

Everything that touches disk lives here: scanning image directories,
reading and writing caption files, probing image sizes and persisting
preset pairs. The editing engine in ``tagsmith.services`` never imports
this package.
"""

from __future__ import annotations

from tagsmith.storage.caption_store import (
    caption_path_for,
    read_caption_text,
    read_tags_for_image,
    write_caption_text,
    write_tags_for_image,
)
from tagsmith.storage.loader import load_image_set
from tagsmith.storage.preset_store import load_preset_pairs, save_preset_pairs

__all__ = [
    "caption_path_for",
    "load_image_set",
    "load_preset_pairs",
    "read_caption_text",
    "read_tags_for_image",
    "save_preset_pairs",
    "write_caption_text",
    "write_tags_for_image",
]
