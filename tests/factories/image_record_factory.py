"""
Factory for ImageRecord Pydantic models using factory_boy.

Provides reusable records for the editing engine tests, plus a helper that
turns a handful of tag lists into a numbered collection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import factory
from factory import LazyAttribute, LazyFunction, Sequence

from tagsmith.models.image_record import ImageDimensions, ImageRecord, ImageSource


class ImageSourceFactory(factory.Factory[ImageSource]):
    """Factory for ImageSource models."""

    class Meta:
        model = ImageSource

    file_name: Any = Sequence(lambda n: f"image_{n:03d}.png")
    relative_path: Any = LazyAttribute(lambda o: o.file_name)
    path: Any = LazyAttribute(lambda o: Path("/data/images") / o.relative_path)


class ImageDimensionsFactory(factory.Factory[ImageDimensions]):
    """Factory for ImageDimensions models."""

    class Meta:
        model = ImageDimensions

    width: Any = LazyFunction(lambda: 512)
    height: Any = LazyFunction(lambda: 768)


class ImageRecordFactory(factory.Factory[ImageRecord]):
    """Factory for ImageRecord models without a backing file."""

    class Meta:
        model = ImageRecord

    id: Any = Sequence(lambda n: f"img{n}")
    tags: Any = LazyFunction(lambda: ["1girl", "solo", "smile"])
    source: Any = LazyFunction(lambda: None)
    dimensions: Any = LazyFunction(lambda: None)


class SourcedImageRecordFactory(ImageRecordFactory):
    """Factory for ImageRecord models that point at an image file."""

    source: Any = factory.SubFactory(ImageSourceFactory)
    id: Any = LazyAttribute(lambda o: o.source.relative_path)
    dimensions: Any = factory.SubFactory(ImageDimensionsFactory)


def make_images(*tag_lists: list[str]) -> list[ImageRecord]:
    """
    Build records ``img0``, ``img1``, ... carrying the given tag lists.

    Examples
    --------
    >>> [image.id for image in make_images(["a"], ["b"])]
    ['img0', 'img1']
    """
    return [
        ImageRecordFactory.build(id=f"img{index}", tags=list(tags))
        for index, tags in enumerate(tag_lists)
    ]
