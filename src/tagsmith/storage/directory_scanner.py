"""Directory scanning for image files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from tagsmith.storage.path_utils import get_extension, join_path, normalize_extension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScannedFile:
    """A file found during a scan."""

    path: Path
    file_name: str
    relative_path: str


def scan_directory(
    root: Path,
    allowed_extensions: Iterable[str],
    include_subdirectories: bool = True,
) -> list[ScannedFile]:
    """
    Find files under *root* whose extension is allowed.

    An empty extension list allows every file. Results are sorted by
    relative path (case-insensitive first), which is also the record
    order of a loaded collection. Each real directory is walked once, so
    a symlink pointing back up the tree does not repeat its files.
    """
    extensions = {normalize_extension(ext) for ext in allowed_extensions} - {""}
    results: list[ScannedFile] = []
    # Resolved directories already walked; breaks symlink cycles.
    visited: set[Path] = {root.resolve()}

    def walk(directory: Path, parent: str) -> None:
        for entry in directory.iterdir():
            if entry.is_dir():
                if not include_subdirectories:
                    continue
                resolved = entry.resolve()
                if resolved in visited:
                    logger.debug("Skipping already scanned directory %s", entry)
                    continue
                visited.add(resolved)
                walk(entry, join_path(parent, entry.name))
                continue
            if not entry.is_file():
                continue
            if extensions and get_extension(entry.name) not in extensions:
                continue
            results.append(
                ScannedFile(
                    path=entry,
                    file_name=entry.name,
                    relative_path=join_path(parent, entry.name),
                )
            )

    walk(root, "")
    results.sort(key=lambda item: (item.relative_path.casefold(), item.relative_path))
    logger.info("Scanned %s: %d matching files", root, len(results))
    return results
