"""
Snapshot-based undo/redo history.

The history is an ordinary object owned by whoever orchestrates edits
(see ``TagEditorSession``); there is no process-wide instance, so
independent sessions and tests never share state. It is not thread-safe:
one logical sequence of calls must own it.

Before a mutating action is applied the caller pushes a snapshot of the
pre-action records. ``undo`` swaps the most recent snapshot with the
current state (which becomes a redo entry) and ``redo`` does the mirror
image. Any fresh push clears the redo side.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional

from tagsmith.models.image_record import ImageRecord
from tagsmith.models.tag_change import TagChange

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 32


@dataclass
class TagSnapshot:
    """Copies of every record's tags at capture time."""

    action_name: str
    tags_by_id: dict[str, list[str]]
    should_confirm: bool = False


@dataclass
class RestoreResult(TagChange):
    """Result of an undo or redo, naming the action it reverted or replayed."""

    action_name: str = ""
    should_confirm: bool = False


class UndoRedoStack:
    """
    Two bounded stacks of tag snapshots.

    Attributes
    ----------
    limit : int
        Maximum number of undo entries. When a push would exceed it, the
        oldest entry is dropped.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._undo: deque[TagSnapshot] = deque(maxlen=limit)
        self._redo: list[TagSnapshot] = []

    @staticmethod
    def capture_tags(images: list[ImageRecord]) -> dict[str, list[str]]:
        """Copy every record's tag list, keyed by record id."""
        return {image.id: list(image.tags) for image in images}

    def push_snapshot(
        self, action_name: str, images: list[ImageRecord], should_confirm: bool = False
    ) -> None:
        """
        Record the state before *action_name* is applied.

        Evicts the oldest undo entry at capacity and clears the redo stack.
        """
        self._undo.append(
            TagSnapshot(
                action_name=action_name,
                tags_by_id=self.capture_tags(images),
                should_confirm=should_confirm,
            )
        )
        self._redo.clear()
        logger.debug(
            "Pushed snapshot %r (%d undo entries)", action_name, len(self._undo)
        )

    def peek_undo(self) -> Optional[TagSnapshot]:
        """Most recent undo entry, if any."""
        return self._undo[-1] if self._undo else None

    def peek_redo(self) -> Optional[TagSnapshot]:
        """Most recent redo entry, if any."""
        return self._redo[-1] if self._redo else None

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def clear(self) -> None:
        """Forget all history."""
        self._undo.clear()
        self._redo.clear()

    def undo(self, images: list[ImageRecord]) -> Optional[RestoreResult]:
        """
        Restore the most recent snapshot.

        Returns
        -------
        RestoreResult | None
            The restored records, or ``None`` when there is nothing to undo.
        """
        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._redo.append(self._mirror(snapshot, images))
        logger.debug("Undo %r", snapshot.action_name)
        return self._apply_snapshot(images, snapshot)

    def redo(self, images: list[ImageRecord]) -> Optional[RestoreResult]:
        """
        Replay the most recently undone action.

        Returns
        -------
        RestoreResult | None
            The restored records, or ``None`` when there is nothing to redo.
        """
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(self._mirror(snapshot, images))
        logger.debug("Redo %r", snapshot.action_name)
        return self._apply_snapshot(images, snapshot)

    def _mirror(self, snapshot: TagSnapshot, images: list[ImageRecord]) -> TagSnapshot:
        return TagSnapshot(
            action_name=snapshot.action_name,
            tags_by_id=self.capture_tags(images),
            should_confirm=snapshot.should_confirm,
        )

    @staticmethod
    def _apply_snapshot(
        images: list[ImageRecord], snapshot: TagSnapshot
    ) -> RestoreResult:
        changed_ids: list[str] = []
        next_images: list[ImageRecord] = []
        for image in images:
            saved = snapshot.tags_by_id.get(image.id)
            if saved is None or saved == image.tags:
                next_images.append(image)
                continue
            changed_ids.append(image.id)
            next_images.append(image.with_tags(saved))
        return RestoreResult(
            images=next_images,
            changed_ids=changed_ids,
            action_name=snapshot.action_name,
            should_confirm=snapshot.should_confirm,
        )
