"""
Configuration management module for tagsmith.

Handles application settings loaded from environment variables and
``.env`` files.
"""

from __future__ import annotations

from tagsmith.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
