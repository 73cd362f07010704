"""
Tests for ``TagEditorSession``.

The session is where history and dirty tracking meet the pure batch
services, so these tests focus on what gets recorded and when.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tagsmith.exceptions import CaptionStoreError, InvalidPatternError
from tagsmith.models.image_record import ImageRecord
from tagsmith.models.regex_options import RegexOptions
from tagsmith.models.tag_pair import AbstractTagPair
from tagsmith.services.editor_session import TagEditorSession
from tagsmith.services.scope import scope_by_ids
from tagsmith.services.undo_redo import UndoRedoStack
from tests.factories.image_record_factory import make_images


@pytest.fixture
def session(sample_images: list[ImageRecord]) -> TagEditorSession:
    return TagEditorSession(sample_images, tag_separator=", ")


def _tags(session: TagEditorSession) -> list[list[str]]:
    return [image.tags for image in session.images]


class TestCommitAndHistory:
    """Tests for history and dirty tracking."""

    def test_change_pushes_history_and_marks_dirty(
        self, session: TagEditorSession
    ) -> None:
        change = session.add_tags("new", scope_by_ids(["img1"]))
        assert change.changed_ids == ["img1"]
        assert session.images[1].tags[-1] == "new"
        assert session.can_undo
        assert session.dirty_ids == {"img1"}
        assert session.history.peek_undo().action_name == "Add Tags"

    def test_noop_does_not_push_history(self, session: TagEditorSession) -> None:
        change = session.delete_tags("missing")
        assert change.changed_ids == []
        assert not session.can_undo
        assert session.dirty_ids == set()

    def test_blank_input_is_noop(self, session: TagEditorSession) -> None:
        assert session.add_tags(" ,  , ").changed_ids == []
        assert session.rename_tags("cat", "  ").changed_ids == []
        assert not session.can_undo

    def test_confirm_flag_depends_on_tag_count(self, session: TagEditorSession) -> None:
        session.add_tags("one")
        assert session.history.peek_undo().should_confirm is False
        session.add_tags("two, three")
        assert session.history.peek_undo().should_confirm is True

    def test_undo_redo_round_trip(self, session: TagEditorSession) -> None:
        before = _tags(session)
        session.sort_alphabetically()
        after = _tags(session)

        undone = session.undo()
        assert undone is not None
        assert undone.action_name == "Sort Tags"
        assert _tags(session) == before

        redone = session.redo()
        assert redone is not None
        assert _tags(session) == after

    def test_undo_on_empty_history(self, session: TagEditorSession) -> None:
        assert session.undo() is None
        assert session.redo() is None

    def test_history_limit_is_honored(self, sample_images: list[ImageRecord]) -> None:
        session = TagEditorSession(sample_images, history=UndoRedoStack(limit=1))
        session.add_tags("a")
        session.add_tags("b")
        assert session.history.undo_depth == 1
        session.undo()
        assert not session.can_undo


class TestSingleRecordEdits:
    """Tests for edits addressed to one record."""

    def test_add_to_one_image(self, session: TagEditorSession) -> None:
        session.add_tags_to_image("img0", "x, y")
        assert session.images[0].tags[-2:] == ["x", "y"]
        assert session.history.peek_undo().should_confirm is False

    def test_add_to_unknown_image(self, session: TagEditorSession) -> None:
        assert session.add_tags_to_image("nope", "x").changed_ids == []

    def test_remove_tag(self, session: TagEditorSession) -> None:
        session.remove_tag_from_image("img2", "dog")
        assert session.images[2].tags == ["outdoors"]
        assert session.history.peek_undo().action_name == "Delete Tag"

    def test_set_caption(self, session: TagEditorSession) -> None:
        session.set_caption("img0", " b ,, a ")
        assert session.images[0].tags == ["b", "a"]

    def test_replace_tag_at_index(self, session: TagEditorSession) -> None:
        session.replace_tag_at_index("img0", 1, "  grin ")
        assert session.images[0].tags == ["1girl", "grin", "cat"]
        assert session.history.peek_undo().action_name == "Rename Tag"

    @pytest.mark.parametrize("index", [-1, 3])
    def test_replace_tag_out_of_range(
        self, session: TagEditorSession, index: int
    ) -> None:
        assert session.replace_tag_at_index("img0", index, "x").changed_ids == []


class TestBatchEdits:
    """Tests for scoped batch actions."""

    def test_rename_tags(self, session: TagEditorSession) -> None:
        session.rename_tags("1girl, cat", "person")
        assert session.images[0].tags == ["person", "smile", "person"]

    def test_rename_matching(self, session: TagEditorSession) -> None:
        session.rename_tags_matching(RegexOptions(pattern="DOG", ignore_case=True), "canine")
        assert session.images[2].tags == ["canine", "outdoors", "canine"]

    def test_invalid_pattern_leaves_state_alone(
        self, session: TagEditorSession
    ) -> None:
        before = _tags(session)
        with pytest.raises(InvalidPatternError):
            session.delete_tags_matching("(")
        assert _tags(session) == before
        assert not session.can_undo

    def test_move_to_front(self, session: TagEditorSession) -> None:
        session.move_tags_to_front("cat")
        assert session.images[0].tags == ["cat", "1girl", "smile"]

    def test_sort_by_frequency_counts_in_scope(self) -> None:
        images = make_images(["a", "b", "b"], ["b", "a", "a", "a"])
        session = TagEditorSession(images)
        session.sort_by_frequency(scope=scope_by_ids(["img0"]))
        assert session.images[0].tags == ["b", "b", "a"]
        assert session.images[1] is images[1]

    def test_reverse_and_shuffle(self, sample_images: list[ImageRecord]) -> None:
        session = TagEditorSession(sample_images, rng=lambda: 0.0)
        session.reverse(keep_first=True, scope=scope_by_ids(["img0"]))
        assert session.images[0].tags == ["1girl", "cat", "smile"]
        session.shuffle(scope=scope_by_ids(["img0"]))
        assert session.images[0].tags == ["cat", "smile", "1girl"]

    def test_cleanup(self) -> None:
        session = TagEditorSession(make_images(["a", "a", " "]))
        session.remove_duplicates()
        assert session.images[0].tags == ["a", " "]
        session.remove_empty()
        assert session.images[0].tags == ["a"]
        assert session.history.undo_depth == 2

    def test_find_and_replace(self, session: TagEditorSession) -> None:
        session.find_and_replace("dog", "cat", whole_tags_only=True)
        assert session.images[2].tags == ["cat", "outdoors", "cat"]
        assert session.match_count("cat", whole_tags_only=True) == 3


class TestAbstractPairs:
    """Tests for conflicts and presets."""

    def test_conflicts_and_pruning(self, session: TagEditorSession) -> None:
        groups = session.abstract_conflicts()
        assert [group.abstract_tag for group in groups] == ["1girl"]

        pair = AbstractTagPair(abstract_tag="1girl", concrete_tag="1girl smiling")
        session.remove_abstract_pairs([pair])
        assert session.images[1].tags == ["1girl smiling", "outdoors"]
        assert session.images[0].tags == ["1girl", "smile", "cat"]

    def test_apply_presets(self, sample_images: list[ImageRecord]) -> None:
        pair = AbstractTagPair(abstract_tag="1girl", concrete_tag="1girl smiling")
        session = TagEditorSession(sample_images, preset_pairs=[pair])
        change = session.apply_preset_pairs()
        assert change.changed_ids == ["img1"]
        assert (
            session.history.peek_undo().action_name == "Remove Abstract Tags (Presets)"
        )
        assert session.abstract_conflicts() == []

    def test_apply_without_presets_is_noop(self, session: TagEditorSession) -> None:
        assert session.apply_preset_pairs().changed_ids == []

    def test_add_preset_pairs_persists_through_sink(
        self, session: TagEditorSession
    ) -> None:
        saved: list[list[AbstractTagPair]] = []
        pair = AbstractTagPair(abstract_tag=" cat ", concrete_tag="black cat")
        result = session.add_preset_pairs([pair], sink=saved.append)
        assert [p.key for p in result] == [("cat", "black cat")]
        assert saved == [result]

        again = session.add_preset_pairs([pair], sink=saved.append)
        assert again is session.preset_pairs
        assert len(saved) == 1

    def test_failing_preset_sink_keeps_old_presets(
        self, session: TagEditorSession
    ) -> None:
        def fail(pairs: list[AbstractTagPair]) -> None:
            raise OSError("disk full")

        pair = AbstractTagPair(abstract_tag="cat", concrete_tag="black cat")
        with pytest.raises(OSError):
            session.add_preset_pairs([pair], sink=fail)
        assert session.preset_pairs == []


class TestSaveDirty:
    """Tests for ``save_dirty``."""

    def test_saves_dirty_records_in_order(self, session: TagEditorSession) -> None:
        session.add_tags("x", scope_by_ids(["img2", "img0"]))
        written: list[str] = []
        saved = session.save_dirty(lambda image: written.append(image.id))
        assert saved == ["img0", "img2"]
        assert written == ["img0", "img2"]
        assert session.dirty_ids == set()
        assert session.save_dirty(lambda image: written.append(image.id)) == []

    def test_partial_failure_keeps_unsaved_dirty(
        self, session: TagEditorSession
    ) -> None:
        session.add_tags("x")

        def sink(image: ImageRecord) -> None:
            if image.id == "img1":
                raise CaptionStoreError(Path("img1.txt"), "boom")

        with pytest.raises(CaptionStoreError):
            session.save_dirty(sink)
        assert session.dirty_ids == {"img1", "img2"}

    def test_undo_marks_restored_records_dirty(
        self, session: TagEditorSession
    ) -> None:
        session.add_tags("x", scope_by_ids(["img0"]))
        session.save_dirty(lambda image: None)
        session.undo()
        assert session.dirty_ids == {"img0"}
