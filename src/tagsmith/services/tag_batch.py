"""
Scope-filtered batch application of tag-list edits.

``update_images_in_scope`` is the single primitive every batch operation
is built on: it runs a tag transform over the records in scope and
reports exactly which records changed. The remaining functions bind one
edit primitive each, defaulting to the all-records scope.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Collection, Iterable
from typing import Optional

from tagsmith.models.image_record import ImageRecord
from tagsmith.models.tag_change import TagChange
from tagsmith.services import tag_edit
from tagsmith.services.regex_builder import PatternInput, build_full_match_regex
from tagsmith.services.scope import ScopePredicate, include_all
from tagsmith.services.tag_edit import RandomSource, TagCounts

logger = logging.getLogger(__name__)

TagTransform = Callable[[list[str], ImageRecord], Optional[list[str]]]


def update_images_in_scope(
    images: list[ImageRecord],
    scope: ScopePredicate,
    update: TagTransform,
) -> TagChange:
    """
    Apply *update* to every record selected by *scope*.

    Parameters
    ----------
    images : list[ImageRecord]
        The record collection, in display order.
    scope : ScopePredicate
        Called once per record with ``(record, position)``.
    update : TagTransform
        Called with ``(tags, record)`` for records in scope. Returns the new
        tag list, or ``None`` to leave the record alone.

    Returns
    -------
    TagChange
        A new record list (unchanged records are the same objects) and the
        ids whose tags differ from their input, in record order.
    """
    changed_ids: list[str] = []
    next_images: list[ImageRecord] = []
    in_scope = 0
    for index, image in enumerate(images):
        if not scope(image, index):
            next_images.append(image)
            continue
        in_scope += 1
        updated = update(image.tags, image)
        if updated is None or updated is image.tags or updated == image.tags:
            next_images.append(image)
            continue
        changed_ids.append(image.id)
        next_images.append(image.with_tags(updated))
    logger.debug(
        "Batch update: %d records, %d in scope, %d changed",
        len(images),
        in_scope,
        len(changed_ids),
    )
    return TagChange(images=next_images, changed_ids=changed_ids)


def set_tags_for_image(
    images: list[ImageRecord], image_id: str, tags: list[str]
) -> TagChange:
    """Replace the tags of a single record."""
    return update_images_in_scope(
        images,
        lambda image, index: image.id == image_id,
        lambda current, image: tags,
    )


def add_tags_to_images(
    images: list[ImageRecord],
    tags_to_add: Iterable[str],
    scope: ScopePredicate = include_all,
) -> TagChange:
    additions = list(tags_to_add)
    return update_images_in_scope(
        images, scope, lambda tags, image: tag_edit.add_tags(tags, additions)
    )


def rename_tags_in_images(
    images: list[ImageRecord],
    old_tags: Collection[str],
    new_tag: str,
    scope: ScopePredicate = include_all,
) -> TagChange:
    return update_images_in_scope(
        images,
        scope,
        lambda tags, image: tag_edit.rename_tags(tags, old_tags, new_tag),
    )


def rename_tags_by_regex_in_images(
    images: list[ImageRecord],
    pattern: PatternInput,
    new_tag: str,
    scope: ScopePredicate = include_all,
) -> TagChange:
    """
    Rename tags matched in full by *pattern*.

    The pattern is compiled before any record is visited, so an invalid
    pattern raises ``InvalidPatternError`` without a partial update.
    """
    build_full_match_regex(pattern)
    return update_images_in_scope(
        images,
        scope,
        lambda tags, image: tag_edit.rename_tags_by_regex(tags, pattern, new_tag),
    )


def delete_tags_in_images(
    images: list[ImageRecord],
    tags_to_remove: Collection[str],
    scope: ScopePredicate = include_all,
) -> TagChange:
    return update_images_in_scope(
        images, scope, lambda tags, image: tag_edit.remove_tags(tags, tags_to_remove)
    )


def delete_tags_by_regex_in_images(
    images: list[ImageRecord],
    pattern: PatternInput,
    scope: ScopePredicate = include_all,
) -> TagChange:
    """
    Delete tags matched in full by *pattern*.

    Like the regex rename, the pattern is validated up front.
    """
    build_full_match_regex(pattern)
    return update_images_in_scope(
        images,
        scope,
        lambda tags, image: tag_edit.remove_tags_by_regex(tags, pattern),
    )


def sort_tags_alphabetically_in_images(
    images: list[ImageRecord],
    keep_first: bool,
    scope: ScopePredicate = include_all,
) -> TagChange:
    return update_images_in_scope(
        images,
        scope,
        lambda tags, image: tag_edit.sort_tags_alphabetically(tags, keep_first),
    )


def sort_tags_by_frequency_in_images(
    images: list[ImageRecord],
    counts: TagCounts,
    keep_first: bool,
    scope: ScopePredicate = include_all,
) -> TagChange:
    return update_images_in_scope(
        images,
        scope,
        lambda tags, image: tag_edit.sort_tags_by_frequency(tags, counts, keep_first),
    )


def reverse_tags_in_images(
    images: list[ImageRecord],
    keep_first: bool,
    scope: ScopePredicate = include_all,
) -> TagChange:
    return update_images_in_scope(
        images, scope, lambda tags, image: tag_edit.reverse_tags(tags, keep_first)
    )


def shuffle_tags_in_images(
    images: list[ImageRecord],
    keep_first: bool,
    rng: RandomSource = random.random,
    scope: ScopePredicate = include_all,
) -> TagChange:
    return update_images_in_scope(
        images,
        scope,
        lambda tags, image: tag_edit.shuffle_tags(tags, keep_first, rng),
    )


def move_tags_to_front_in_images(
    images: list[ImageRecord],
    tags_to_move: Iterable[str],
    scope: ScopePredicate = include_all,
) -> TagChange:
    order = list(tags_to_move)
    return update_images_in_scope(
        images, scope, lambda tags, image: tag_edit.move_tags_to_front(tags, order)
    )


def remove_duplicate_tags_in_images(
    images: list[ImageRecord], scope: ScopePredicate = include_all
) -> TagChange:
    return update_images_in_scope(
        images, scope, lambda tags, image: tag_edit.remove_duplicate_tags(tags)
    )


def remove_empty_tags_in_images(
    images: list[ImageRecord], scope: ScopePredicate = include_all
) -> TagChange:
    return update_images_in_scope(
        images, scope, lambda tags, image: tag_edit.remove_empty_tags(tags)
    )
