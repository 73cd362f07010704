"""
tagsmith - Batch tag editor for image caption datasets.

Edits the comma-separated caption files that sit next to training images:
batch add/rename/delete/reorder/deduplicate, find and replace, and
abstract/concrete tag-pair pruning, all with undo/redo.
"""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "tagsmith"
__email__ = "noreply@tagsmith.dev"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
