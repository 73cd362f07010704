"""
Image size probing.

``Image.open`` is lazy and only parses the file header, so probing a large
dataset does not decode any pixel data. Unreadable or unknown files yield
``None``; probing never raises.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from tagsmith.models.image_record import ImageDimensions

logger = logging.getLogger(__name__)


def read_image_dimensions(path: Path) -> Optional[ImageDimensions]:
    """Return the pixel size of the image at *path*, or ``None``."""
    try:
        with Image.open(path) as image:
            return ImageDimensions(width=image.width, height=image.height)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError):
        logger.warning("Could not read image size of %s", path, exc_info=True)
        return None
