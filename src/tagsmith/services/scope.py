"""
Scope predicates.

A scope decides which records a batch operation touches. It is a plain
callable over ``(record, position)``, evaluated once per record per call.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from typing import Optional

from tagsmith.models.enums import ScopeMode
from tagsmith.models.image_record import ImageRecord

ScopePredicate = Callable[[ImageRecord, int], bool]


def include_all(image: ImageRecord, index: int) -> bool:
    """Scope that selects every record."""
    return True


def scope_by_ids(ids: Iterable[str]) -> ScopePredicate:
    """Scope that selects records whose identifier is in *ids*."""
    id_set = frozenset(ids)

    def predicate(image: ImageRecord, index: int) -> bool:
        return image.id in id_set

    return predicate


def filter_images(
    images: list[ImageRecord],
    filter_text: str,
    tag_filter: Optional[str],
    tag_separator: str,
) -> list[ImageRecord]:
    """
    Filter records the way the gallery search box does.

    A record passes when it carries ``tag_filter`` (exact) and, if
    ``filter_text`` is non-blank, its file name or joined caption contains
    the text case-insensitively. With neither filter the input list is
    returned as is.
    """
    needle = filter_text.strip().lower()
    if not needle and not tag_filter:
        return images

    def keep(image: ImageRecord) -> bool:
        if tag_filter and tag_filter not in image.tags:
            return False
        if not needle:
            return True
        file_name = image.source.file_name if image.source else image.id
        if needle in file_name.lower():
            return True
        return needle in tag_separator.join(image.tags).lower()

    return [image for image in images if keep(image)]


def build_scope(
    mode: ScopeMode,
    images: list[ImageRecord],
    *,
    selected_ids: Collection[str] = (),
    filter_text: str = "",
    tag_filter: Optional[str] = None,
    tag_separator: str = ", ",
) -> ScopePredicate:
    """
    Turn a scope mode and its inputs into a predicate.

    ``FILTERED`` is resolved eagerly against *images*: the predicate keeps
    selecting the same records even if later edits would change whether
    they pass the filter.
    """
    if mode == ScopeMode.ALL:
        return include_all
    if mode == ScopeMode.SELECTED:
        return scope_by_ids(selected_ids)
    filtered = filter_images(images, filter_text, tag_filter, tag_separator)
    return scope_by_ids(image.id for image in filtered)
