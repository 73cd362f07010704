"""
CLI interface module for tagsmith.

Provides the Typer-based command-line interface for editing the caption
files of an image directory.
"""

from __future__ import annotations

__all__: list[str] = []
