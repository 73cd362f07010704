"""Utility modules for tagsmith."""

from tagsmith.utils.fuzzy import edit_distance, suggest_tags

__all__ = ["edit_distance", "suggest_tags"]
