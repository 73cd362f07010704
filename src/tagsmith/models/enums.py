"""
Enums for tagsmith models.

Defines enumeration types used across the application for consistent
type safety and validation.
"""

from __future__ import annotations

from enum import Enum


class ScopeMode(str, Enum):
    """Which records a batch operation touches."""

    ALL = "all"
    FILTERED = "filtered"
    SELECTED = "selected"


class TagSortMode(str, Enum):
    """Ordering used by the all-tags listing."""

    FREQUENCY = "frequency"
    ALPHABETICAL = "alphabetical"


class SortOrder(str, Enum):
    """Direction of the all-tags listing."""

    ASC = "asc"
    DESC = "desc"
