"""Loading an image directory into records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from tagsmith.config.settings import DEFAULT_IMAGE_EXTENSIONS
from tagsmith.models.image_record import ImageRecord, ImageSource
from tagsmith.storage.caption_store import read_tags_for_image
from tagsmith.storage.directory_scanner import scan_directory
from tagsmith.storage.image_metadata import read_image_dimensions

logger = logging.getLogger(__name__)


def load_image_set(
    root: Path,
    tag_separator: str,
    allowed_extensions: Optional[Iterable[str]] = None,
    include_subdirectories: bool = True,
    load_dimensions: bool = False,
) -> list[ImageRecord]:
    """
    Scan *root* and build one record per image.

    Record ids are the POSIX paths relative to *root*; tags come from each
    image's caption file.
    """
    extensions = (
        list(allowed_extensions)
        if allowed_extensions is not None
        else DEFAULT_IMAGE_EXTENSIONS
    )
    images: list[ImageRecord] = []
    for scanned in scan_directory(root, extensions, include_subdirectories):
        source = ImageSource(
            path=scanned.path,
            file_name=scanned.file_name,
            relative_path=scanned.relative_path,
        )
        dimensions = read_image_dimensions(scanned.path) if load_dimensions else None
        images.append(
            ImageRecord(
                id=scanned.relative_path,
                source=source,
                tags=read_tags_for_image(source, tag_separator),
                dimensions=dimensions,
            )
        )
    logger.info("Loaded %d images from %s", len(images), root)
    return images
