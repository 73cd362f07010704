"""
Image record models.

An ``ImageRecord`` is one training image together with its ordered tag
list. Records are immutable: every transform that changes the tags
produces a new record with the same identifier.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageDimensions(BaseModel):
    """Pixel size of an image."""

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class ImageSource(BaseModel):
    """Where an image (and therefore its caption file) lives on disk."""

    path: Path = Field(..., description="Absolute path of the image file")
    file_name: str = Field(..., min_length=1)
    relative_path: str = Field(
        ..., min_length=1, description="POSIX path relative to the scanned root"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def directory(self) -> Path:
        """Directory containing the image."""
        return self.path.parent


class ImageRecord(BaseModel):
    """
    A record with a stable identifier and an ordered tag sequence.

    The model is frozen, but the ``tags`` list itself is not. Treat it as
    read-only: a batch edit returns unchanged records as the same objects,
    so an in-place change would show up in every collection holding them.
    Use ``with_tags`` to get a changed copy.
    """

    id: str = Field(..., min_length=1, description="Stable unique identifier")
    tags: list[str] = Field(default_factory=list)
    source: Optional[ImageSource] = Field(default=None)
    dimensions: Optional[ImageDimensions] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    def with_tags(self, tags: list[str]) -> ImageRecord:
        """Return a copy of this record carrying *tags*."""
        return self.model_copy(update={"tags": list(tags)})
