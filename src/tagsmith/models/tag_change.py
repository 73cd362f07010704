"""
Change result returned by every batch mutation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .image_record import ImageRecord


@dataclass
class TagChange:
    """
    Updated records plus the identifiers whose tags actually changed.

    ``changed_ids`` follows input record order and contains an id only when
    the record's tag list differs in length or content from its input.
    """

    images: list[ImageRecord]
    changed_ids: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Whether any record changed."""
        return bool(self.changed_ids)
