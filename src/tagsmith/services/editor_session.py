"""
Editing session orchestrating batch actions and history.

A ``TagEditorSession`` owns one record collection together with the undo
history that belongs to it. Each action computes a ``TagChange`` with the
pure batch services and, only when something changed, snapshots the
pre-action records, commits the new records and marks the changed ids
dirty. Choosing the scope is the caller's business; every action takes a
scope predicate and defaults to all records.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from typing import Optional

from tagsmith.models.image_record import ImageRecord
from tagsmith.models.regex_options import RegexOptions
from tagsmith.models.tag_change import TagChange
from tagsmith.models.tag_pair import AbstractTagPair
from tagsmith.services import tag_batch
from tagsmith.services.caption_format import parse_caption
from tagsmith.services.preset_pairs import merge_preset_pairs, normalize_pairs
from tagsmith.services.regex_builder import PatternInput
from tagsmith.services.scope import ScopePredicate, include_all, scope_by_ids
from tagsmith.services.tag_edit import RandomSource
from tagsmith.services.tag_relations import (
    AbstractConflictGroup,
    collect_abstract_tag_pairs_in_images,
    group_abstract_conflicts,
    remove_abstract_tags_by_pairs_in_images,
)
from tagsmith.services.tag_search import (
    FindReplaceOptions,
    TextSearchOptions,
    find_and_replace_in_images,
    get_text_match_count,
)
from tagsmith.services.tag_stats import count_tags
from tagsmith.services.undo_redo import RestoreResult, UndoRedoStack

logger = logging.getLogger(__name__)

PersistenceSink = Callable[[ImageRecord], None]
PresetSink = Callable[[list[AbstractTagPair]], None]


class TagEditorSession:
    """
    One editing session over a collection of image records.

    Parameters
    ----------
    images : Iterable[ImageRecord]
        The records, in display order.
    tag_separator : str
        Separator used to parse tag input and serialize captions.
    history : UndoRedoStack | None
        The undo history for this session. A fresh stack is created when
        omitted; pass one explicitly to control its depth or share it with
        a caller that inspects it.
    preset_pairs : Iterable[AbstractTagPair]
        Stored abstract/concrete presets, normalized on entry.
    rng : RandomSource
        Random source used by shuffle.
    """

    def __init__(
        self,
        images: Iterable[ImageRecord],
        tag_separator: str = ", ",
        history: Optional[UndoRedoStack] = None,
        preset_pairs: Iterable[AbstractTagPair] = (),
        rng: RandomSource = random.random,
    ) -> None:
        self.images: list[ImageRecord] = list(images)
        self.tag_separator = tag_separator
        self.history = history if history is not None else UndoRedoStack()
        self.preset_pairs: list[AbstractTagPair] = normalize_pairs(preset_pairs)
        self.dirty_ids: set[str] = set()
        self._rng = rng

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def get_image(self, image_id: str) -> Optional[ImageRecord]:
        return next((image for image in self.images if image.id == image_id), None)

    def dirty_records(self) -> list[ImageRecord]:
        """Records with unsaved changes, in record order."""
        return [image for image in self.images if image.id in self.dirty_ids]

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def parse_tag_input(self, text: str) -> list[str]:
        """Split user input into trimmed, non-empty tags."""
        return parse_caption(text, self.tag_separator)

    def _commit(
        self, action_name: str, should_confirm: bool, change: TagChange
    ) -> TagChange:
        if not change.changed_ids:
            return change
        self.history.push_snapshot(action_name, self.images, should_confirm)
        self.images = change.images
        self.dirty_ids.update(change.changed_ids)
        logger.info("%s changed %d records", action_name, len(change.changed_ids))
        return change

    def _unchanged(self) -> TagChange:
        return TagChange(images=self.images, changed_ids=[])

    # ------------------------------------------------------------------
    # Single-record edits
    # ------------------------------------------------------------------

    def add_tags_to_image(self, image_id: str, tags_input: str) -> TagChange:
        tags = self.parse_tag_input(tags_input)
        if not tags or self.get_image(image_id) is None:
            return self._unchanged()
        change = tag_batch.add_tags_to_images(self.images, tags, scope_by_ids([image_id]))
        return self._commit("Add Tags", False, change)

    def remove_tag_from_image(self, image_id: str, tag: str) -> TagChange:
        change = tag_batch.delete_tags_in_images(
            self.images, [tag], scope_by_ids([image_id])
        )
        return self._commit("Delete Tag", False, change)

    def set_caption(self, image_id: str, caption: str) -> TagChange:
        """Replace one record's tags with the parsed *caption*."""
        if self.get_image(image_id) is None:
            return self._unchanged()
        tags = self.parse_tag_input(caption)
        change = tag_batch.set_tags_for_image(self.images, image_id, tags)
        return self._commit("Edit Tags", False, change)

    def replace_tag_at_index(self, image_id: str, index: int, new_tag: str) -> TagChange:
        """Rename the tag at *index* of one record; blank names are ignored."""
        image = self.get_image(image_id)
        trimmed = new_tag.strip()
        if image is None or not trimmed or not 0 <= index < len(image.tags):
            return self._unchanged()
        tags = list(image.tags)
        tags[index] = trimmed
        change = tag_batch.set_tags_for_image(self.images, image_id, tags)
        return self._commit("Rename Tag", False, change)

    # ------------------------------------------------------------------
    # Batch edits
    # ------------------------------------------------------------------

    def add_tags(self, tags_input: str, scope: ScopePredicate = include_all) -> TagChange:
        tags = self.parse_tag_input(tags_input)
        if not tags:
            return self._unchanged()
        change = tag_batch.add_tags_to_images(self.images, tags, scope)
        return self._commit("Add Tags", len(tags) > 1, change)

    def rename_tags(
        self, old_tags_input: str, new_tag: str, scope: ScopePredicate = include_all
    ) -> TagChange:
        old_tags = self.parse_tag_input(old_tags_input)
        if not new_tag.strip() or not old_tags:
            return self._unchanged()
        change = tag_batch.rename_tags_in_images(self.images, old_tags, new_tag, scope)
        return self._commit("Rename Tags", True, change)

    def rename_tags_matching(
        self, pattern: PatternInput, new_tag: str, scope: ScopePredicate = include_all
    ) -> TagChange:
        """
        Rename every tag fully matched by *pattern*.

        Raises
        ------
        InvalidPatternError
            Before anything changes, if the pattern does not compile.
        """
        if not new_tag.strip():
            return self._unchanged()
        change = tag_batch.rename_tags_by_regex_in_images(
            self.images, pattern, new_tag, scope
        )
        return self._commit("Rename Tags", True, change)

    def delete_tags(
        self, tags_input: str, scope: ScopePredicate = include_all
    ) -> TagChange:
        tags = self.parse_tag_input(tags_input)
        if not tags:
            return self._unchanged()
        change = tag_batch.delete_tags_in_images(self.images, tags, scope)
        return self._commit("Delete Tags", True, change)

    def delete_tags_matching(
        self, pattern: PatternInput, scope: ScopePredicate = include_all
    ) -> TagChange:
        """
        Delete every tag fully matched by *pattern*.

        Raises
        ------
        InvalidPatternError
            Before anything changes, if the pattern does not compile.
        """
        change = tag_batch.delete_tags_by_regex_in_images(self.images, pattern, scope)
        return self._commit("Delete Tags", True, change)

    def move_tags_to_front(
        self, tags_input: str, scope: ScopePredicate = include_all
    ) -> TagChange:
        tags = self.parse_tag_input(tags_input)
        if not tags:
            return self._unchanged()
        change = tag_batch.move_tags_to_front_in_images(self.images, tags, scope)
        return self._commit("Move Tags to Front", True, change)

    def sort_alphabetically(
        self, keep_first: bool = False, scope: ScopePredicate = include_all
    ) -> TagChange:
        change = tag_batch.sort_tags_alphabetically_in_images(
            self.images, keep_first, scope
        )
        return self._commit("Sort Tags", True, change)

    def sort_by_frequency(
        self, keep_first: bool = False, scope: ScopePredicate = include_all
    ) -> TagChange:
        """Sort by how often each tag occurs among the records in *scope*."""
        counts = count_tags(self.images, scope)
        change = tag_batch.sort_tags_by_frequency_in_images(
            self.images, counts, keep_first, scope
        )
        return self._commit("Sort Tags", True, change)

    def reverse(
        self, keep_first: bool = False, scope: ScopePredicate = include_all
    ) -> TagChange:
        change = tag_batch.reverse_tags_in_images(self.images, keep_first, scope)
        return self._commit("Reverse Tags", True, change)

    def shuffle(
        self, keep_first: bool = False, scope: ScopePredicate = include_all
    ) -> TagChange:
        change = tag_batch.shuffle_tags_in_images(
            self.images, keep_first, self._rng, scope
        )
        return self._commit("Shuffle Tags", True, change)

    def remove_duplicates(self, scope: ScopePredicate = include_all) -> TagChange:
        change = tag_batch.remove_duplicate_tags_in_images(self.images, scope)
        return self._commit("Remove Duplicate Tags", True, change)

    def remove_empty(self, scope: ScopePredicate = include_all) -> TagChange:
        change = tag_batch.remove_empty_tags_in_images(self.images, scope)
        return self._commit("Remove Empty Tags", True, change)

    # ------------------------------------------------------------------
    # Text search
    # ------------------------------------------------------------------

    def find_and_replace(
        self,
        find_text: str,
        replace_text: str,
        *,
        use_regex: bool = False,
        whole_tags_only: bool = False,
        ignore_case: bool = False,
        scope: ScopePredicate = include_all,
    ) -> TagChange:
        if not find_text:
            return self._unchanged()
        options = FindReplaceOptions(
            tag_separator=self.tag_separator,
            scope=scope,
            whole_tags_only=whole_tags_only,
            use_regex=use_regex,
            ignore_case=ignore_case,
        )
        change = find_and_replace_in_images(self.images, find_text, replace_text, options)
        return self._commit("Find and Replace", True, change)

    def match_count(
        self,
        text: str,
        *,
        use_regex: bool = False,
        whole_tags_only: bool = False,
        ignore_case: bool = False,
        scope: ScopePredicate = include_all,
    ) -> int:
        options = TextSearchOptions(
            tag_separator=self.tag_separator,
            scope=scope,
            whole_tags_only=whole_tags_only,
            use_regex=use_regex,
            ignore_case=ignore_case,
        )
        return get_text_match_count(self.images, text, options)

    # ------------------------------------------------------------------
    # Abstract/concrete pairs
    # ------------------------------------------------------------------

    def abstract_conflicts(
        self, scope: ScopePredicate = include_all
    ) -> list[AbstractConflictGroup]:
        """Mined pairs in *scope*, grouped for review and flagged against presets."""
        stats = collect_abstract_tag_pairs_in_images(self.images, scope)
        return group_abstract_conflicts(stats, self.preset_pairs)

    def remove_abstract_pairs(
        self, pairs: Iterable[AbstractTagPair], scope: ScopePredicate = include_all
    ) -> TagChange:
        change = remove_abstract_tags_by_pairs_in_images(self.images, pairs, scope)
        return self._commit("Remove Abstract Tags", True, change)

    def apply_preset_pairs(self, scope: ScopePredicate = include_all) -> TagChange:
        if not self.preset_pairs:
            return self._unchanged()
        change = remove_abstract_tags_by_pairs_in_images(
            self.images, self.preset_pairs, scope
        )
        return self._commit("Remove Abstract Tags (Presets)", True, change)

    def add_preset_pairs(
        self, pairs: Iterable[AbstractTagPair], sink: Optional[PresetSink] = None
    ) -> list[AbstractTagPair]:
        """
        Merge *pairs* into the stored presets.

        When the merge adds anything, *sink* (if given) persists the new
        list before the session adopts it; a sink failure propagates and
        leaves the presets untouched.
        """
        merged = merge_preset_pairs(self.preset_pairs, pairs)
        if len(merged) == len(self.preset_pairs):
            return self.preset_pairs
        if sink is not None:
            sink(merged)
        self.preset_pairs = merged
        return merged

    # ------------------------------------------------------------------
    # History and persistence
    # ------------------------------------------------------------------

    def undo(self) -> Optional[RestoreResult]:
        """Revert the last action; ``None`` when there is nothing to undo."""
        return self._restore(self.history.undo(self.images))

    def redo(self) -> Optional[RestoreResult]:
        """Replay the last undone action; ``None`` when there is nothing to redo."""
        return self._restore(self.history.redo(self.images))

    def _restore(self, result: Optional[RestoreResult]) -> Optional[RestoreResult]:
        if result is None:
            return None
        self.images = result.images
        self.dirty_ids.update(result.changed_ids)
        return result

    def save_dirty(self, sink: PersistenceSink) -> list[str]:
        """
        Write every dirty record through *sink*.

        Records written before a failure are no longer dirty; the failure
        itself propagates.

        Returns
        -------
        list[str]
            Ids that were written, in record order.
        """
        saved: list[str] = []
        try:
            for image in self.dirty_records():
                sink(image)
                saved.append(image.id)
        finally:
            self.dirty_ids.difference_update(saved)
        if saved:
            logger.info("Saved %d records", len(saved))
        return saved
