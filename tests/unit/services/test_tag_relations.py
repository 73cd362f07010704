"""
Tests for abstract/concrete tag pair mining and pruning.
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from tagsmith.models.tag_pair import AbstractTagPair, AbstractTagPairStat
from tagsmith.services.scope import scope_by_ids
from tagsmith.services.tag_relations import (
    build_pair_map,
    collect_abstract_tag_pairs_in_images,
    contains_token_sequence,
    find_abstract_tag_pairs,
    group_abstract_conflicts,
    remove_abstract_tags,
    remove_abstract_tags_by_pairs_in_images,
    tokenize,
)
from tests.factories.image_record_factory import make_images


def _keys(pairs: list[AbstractTagPair]) -> list[tuple[str, str]]:
    return [pair.key for pair in pairs]


class TestTokens:
    """Tests for tokenizing and token-sequence containment."""

    def test_tokenize_collapses_whitespace(self) -> None:
        assert tokenize("  long   red dress ") == ("long", "red", "dress")

    def test_contiguous_run(self) -> None:
        assert contains_token_sequence("long red dress", "red dress")
        assert not contains_token_sequence("long red dress", "long dress")

    def test_tokens_compare_exactly(self) -> None:
        assert not contains_token_sequence("category", "cat")
        assert not contains_token_sequence("Red dress", "red")

    def test_blank_abstract_never_matches(self) -> None:
        assert not contains_token_sequence("red dress", "  ")


class TestFindAbstractTagPairs:
    """Tests for ``find_abstract_tag_pairs``."""

    def test_single_pair(self) -> None:
        assert _keys(find_abstract_tag_pairs(["1girl", "1girl smiling", "cat"])) == [
            ("1girl", "1girl smiling")
        ]

    def test_chain_is_ordered_by_length_position(self) -> None:
        pairs = find_abstract_tag_pairs(["long red dress", "red dress", "dress"])
        assert _keys(pairs) == [
            ("dress", "red dress"),
            ("dress", "long red dress"),
            ("red dress", "long red dress"),
        ]

    def test_duplicates_and_blanks_are_ignored(self) -> None:
        pairs = find_abstract_tag_pairs(["cat", "cat", " ", "black cat"])
        assert _keys(pairs) == [("cat", "black cat")]

    def test_unrelated_tags(self) -> None:
        assert find_abstract_tag_pairs(["cat", "dog", "category"]) == []

    def test_fewer_than_two_tags(self) -> None:
        assert find_abstract_tag_pairs(["cat"]) == []
        assert find_abstract_tag_pairs([]) == []

    @given(
        st.lists(
            st.lists(st.sampled_from(["red", "long", "dress", "hair"]), min_size=1, max_size=3)
            .map(" ".join),
            max_size=6,
        )
    )
    def test_every_pair_is_a_real_containment(self, tags: list[str]) -> None:
        for pair in find_abstract_tag_pairs(tags):
            assert pair.abstract_tag != pair.concrete_tag
            assert len(pair.abstract_tag) <= len(pair.concrete_tag)
            assert contains_token_sequence(pair.concrete_tag, pair.abstract_tag)


class TestCollectPairs:
    """Tests for ``collect_abstract_tag_pairs_in_images``."""

    def test_counts_once_per_record(self) -> None:
        images = make_images(
            ["cat", "black cat", "cat"],
            ["black cat", "cat"],
            ["dog"],
        )
        stats = collect_abstract_tag_pairs_in_images(images)
        assert len(stats) == 1
        assert stats[0].key == ("cat", "black cat")
        assert stats[0].count == 2
        assert stats[0].image_ids == ["img0", "img1"]

    def test_respects_scope(self) -> None:
        images = make_images(["cat", "black cat"], ["cat", "black cat"])
        stats = collect_abstract_tag_pairs_in_images(images, scope_by_ids(["img1"]))
        assert stats[0].image_ids == ["img1"]


class TestPruning:
    """Tests for removing abstract tags."""

    def test_build_pair_map_skips_blank(self) -> None:
        pairs = [
            AbstractTagPair(abstract_tag="cat", concrete_tag="black cat"),
            AbstractTagPair(abstract_tag="cat", concrete_tag="white cat"),
            AbstractTagPair(abstract_tag=" ", concrete_tag="dog"),
        ]
        assert build_pair_map(pairs) == {"cat": {"black cat", "white cat"}}

    def test_removes_every_occurrence_when_partner_present(self) -> None:
        pair_map = {"1girl": {"1girl smiling"}}
        assert remove_abstract_tags(["1girl", "1girl smiling", "1girl"], pair_map) == [
            "1girl smiling"
        ]

    def test_keeps_abstract_without_partner(self) -> None:
        tags = ["1girl", "smile"]
        assert remove_abstract_tags(tags, {"1girl": {"1girl smiling"}}) is tags

    def test_batch_pruning(self) -> None:
        images = make_images(["cat", "black cat"], ["cat"], ["dog", "big dog"])
        pairs = [
            AbstractTagPair(abstract_tag="cat", concrete_tag="black cat"),
            AbstractTagPair(abstract_tag="dog", concrete_tag="big dog"),
        ]
        change = remove_abstract_tags_by_pairs_in_images(images, pairs)
        assert change.changed_ids == ["img0", "img2"]
        assert change.images[0].tags == ["black cat"]
        assert change.images[1] is images[1]
        assert change.images[2].tags == ["big dog"]

    def test_empty_pairs_is_noop(self) -> None:
        images = make_images(["cat", "black cat"])
        change = remove_abstract_tags_by_pairs_in_images(images, [])
        assert change.images is images
        assert change.changed_ids == []


class TestGroupConflicts:
    """Tests for ``group_abstract_conflicts``."""

    def test_groups_sorted_by_total_and_flag_presets(self) -> None:
        stats = [
            AbstractTagPairStat(
                abstract_tag="dog", concrete_tag="big dog", count=1, image_ids=["a"]
            ),
            AbstractTagPairStat(
                abstract_tag="cat", concrete_tag="white cat", count=1, image_ids=["b"]
            ),
            AbstractTagPairStat(
                abstract_tag="cat",
                concrete_tag="black cat",
                count=3,
                image_ids=["c", "d", "e"],
            ),
        ]
        presets = [AbstractTagPair(abstract_tag="cat", concrete_tag="white cat")]
        groups = group_abstract_conflicts(stats, presets)

        assert [group.abstract_tag for group in groups] == ["cat", "dog"]
        assert groups[0].total_count == 4
        assert [item.concrete_tag for item in groups[0].items] == [
            "black cat",
            "white cat",
        ]
        assert [item.is_preset for item in groups[0].items] == [False, True]
        assert groups[1].items[0].image_ids == ["a"]
