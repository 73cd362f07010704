"""
Tag editing engine for tagsmith.

Pure, synchronous services over in-memory records: caption parsing,
scope predicates, tag-list primitives, batch application, text search,
statistics, abstract/concrete pair mining, preset normalization and
undo/redo history. None of these modules touches the file system.
"""

from __future__ import annotations

from tagsmith.services.editor_session import TagEditorSession
from tagsmith.services.scope import ScopePredicate, include_all, scope_by_ids
from tagsmith.services.tag_batch import update_images_in_scope
from tagsmith.services.undo_redo import RestoreResult, TagSnapshot, UndoRedoStack

__all__ = [
    "RestoreResult",
    "ScopePredicate",
    "TagEditorSession",
    "TagSnapshot",
    "UndoRedoStack",
    "include_all",
    "scope_by_ids",
    "update_images_in_scope",
]
