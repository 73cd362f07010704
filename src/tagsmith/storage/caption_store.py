"""
Caption file persistence.

Each image ``name.ext`` has its caption in ``name.txt`` in the same
directory. A missing caption file reads as an empty caption.
"""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

from tagsmith.exceptions import CaptionStoreError
from tagsmith.models.image_record import ImageSource
from tagsmith.services.caption_format import format_caption, parse_caption
from tagsmith.storage.path_utils import strip_extension

logger = logging.getLogger(__name__)


def caption_path_for(image_path: Path) -> Path:
    """Path of the caption file belonging to *image_path*."""
    return image_path.with_name(f"{strip_extension(image_path.name)}.txt")


def read_caption_text(image_path: Path) -> str:
    """Read the caption for *image_path*, or ``""`` if there is none."""
    caption_path = caption_path_for(image_path)
    try:
        return caption_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return ""
    except OSError:
        logger.warning("Could not read caption file %s", caption_path, exc_info=True)
        return ""


def read_tags_for_image(source: ImageSource, tag_separator: str) -> list[str]:
    """Read and parse the tags of one image."""
    return parse_caption(read_caption_text(source.path), tag_separator)


def write_caption_text(image_path: Path, caption: str) -> Path:
    """
    Write a caption next to *image_path*.

    The file is written to a temporary name first and then moved into
    place, so a failed write never leaves a truncated caption behind.

    Raises
    ------
    CaptionStoreError
        If the file cannot be written.
    """
    caption_path = caption_path_for(image_path)
    tmp_path = caption_path.with_name(f".{caption_path.stem}.tmp.{uuid4()}")
    try:
        tmp_path.write_text(caption, encoding="utf-8")
        tmp_path.replace(caption_path)
    except OSError as e:
        logger.error("Failed to write caption file %s", caption_path, exc_info=True)
        tmp_path.unlink(missing_ok=True)
        raise CaptionStoreError(caption_path) from e
    logger.debug("Wrote caption %s", caption_path)
    return caption_path


def write_tags_for_image(
    source: ImageSource, tags: list[str], tag_separator: str
) -> Path:
    """Serialize *tags* and write them as the caption of one image."""
    return write_caption_text(source.path, format_caption(tags, tag_separator))
