"""
Data models module for tagsmith.

Defines Pydantic models for image records, tag pairs, preset files and
regex options, plus the change result shared by the batch services.
"""

from __future__ import annotations

from .enums import ScopeMode, SortOrder, TagSortMode
from .image_record import ImageDimensions, ImageRecord, ImageSource
from .regex_options import RegexOptions
from .tag_change import TagChange
from .tag_pair import AbstractTagPair, AbstractTagPairStat, TagPresetFile

__all__ = [
    "AbstractTagPair",
    "AbstractTagPairStat",
    "ImageDimensions",
    "ImageRecord",
    "ImageSource",
    "RegexOptions",
    "ScopeMode",
    "SortOrder",
    "TagChange",
    "TagPresetFile",
    "TagSortMode",
]
