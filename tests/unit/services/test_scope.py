"""
Tests for scope predicates.
"""

from __future__ import annotations

from tagsmith.models.enums import ScopeMode
from tagsmith.models.image_record import ImageRecord
from tagsmith.services.scope import (
    build_scope,
    filter_images,
    include_all,
    scope_by_ids,
)
from tests.factories.image_record_factory import (
    ImageRecordFactory,
    ImageSourceFactory,
    make_images,
)


def _selected(images: list[ImageRecord], predicate) -> list[str]:
    return [image.id for index, image in enumerate(images) if predicate(image, index)]


class TestBasicScopes:
    """Tests for ``include_all`` and ``scope_by_ids``."""

    def test_include_all(self, sample_images: list[ImageRecord]) -> None:
        assert _selected(sample_images, include_all) == ["img0", "img1", "img2"]

    def test_scope_by_ids(self, sample_images: list[ImageRecord]) -> None:
        predicate = scope_by_ids(["img2", "missing", "img0"])
        assert _selected(sample_images, predicate) == ["img0", "img2"]

    def test_scope_by_ids_empty(self, sample_images: list[ImageRecord]) -> None:
        assert _selected(sample_images, scope_by_ids([])) == []


class TestFilterImages:
    """Tests for ``filter_images``."""

    def test_no_filters_returns_input(self, sample_images: list[ImageRecord]) -> None:
        assert filter_images(sample_images, "  ", None, ", ") is sample_images

    def test_text_matches_caption_case_insensitively(
        self, sample_images: list[ImageRecord]
    ) -> None:
        result = filter_images(sample_images, "OUTDOORS", None, ", ")
        assert [image.id for image in result] == ["img1", "img2"]

    def test_text_can_span_separator(self, sample_images: list[ImageRecord]) -> None:
        result = filter_images(sample_images, "smile, cat", None, ", ")
        assert [image.id for image in result] == ["img0"]

    def test_text_matches_file_name(self) -> None:
        images = [
            ImageRecordFactory.build(
                id="x", tags=["a"], source=ImageSourceFactory.build(file_name="beach.png")
            ),
            ImageRecordFactory.build(id="y", tags=["b"]),
        ]
        assert [image.id for image in filter_images(images, "beach", None, ", ")] == ["x"]

    def test_tag_filter_is_exact(self, sample_images: list[ImageRecord]) -> None:
        result = filter_images(sample_images, "", "1girl", ", ")
        assert [image.id for image in result] == ["img0", "img1"]

    def test_tag_and_text_combine(self, sample_images: list[ImageRecord]) -> None:
        result = filter_images(sample_images, "outdoors", "1girl", ", ")
        assert [image.id for image in result] == ["img1"]


class TestBuildScope:
    """Tests for ``build_scope``."""

    def test_all_mode(self, sample_images: list[ImageRecord]) -> None:
        assert build_scope(ScopeMode.ALL, sample_images) is include_all

    def test_selected_mode(self, sample_images: list[ImageRecord]) -> None:
        predicate = build_scope(
            ScopeMode.SELECTED, sample_images, selected_ids={"img1"}
        )
        assert _selected(sample_images, predicate) == ["img1"]

    def test_filtered_mode_is_resolved_eagerly(self) -> None:
        images = make_images(["cat"], ["dog"])
        predicate = build_scope(ScopeMode.FILTERED, images, filter_text="cat")
        edited = [images[0].with_tags(["bird"]), images[1]]
        assert _selected(edited, predicate) == ["img0"]
