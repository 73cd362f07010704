"""Small helpers for file names and extensions."""

from __future__ import annotations


def normalize_extension(extension: str) -> str:
    """
    Lower-case an extension and give it a leading dot.

    Examples
    --------
    >>> normalize_extension(" PNG ")
    '.png'
    >>> normalize_extension("")
    ''
    """
    trimmed = extension.strip().lower()
    if not trimmed:
        return ""
    return trimmed if trimmed.startswith(".") else f".{trimmed}"


def get_extension(file_name: str) -> str:
    """Return the lower-cased extension of *file_name*, or ``""`` if it has none."""
    last_dot = file_name.rfind(".")
    if last_dot == -1 or last_dot == len(file_name) - 1:
        return ""
    return file_name[last_dot:].lower()


def strip_extension(file_name: str) -> str:
    """Drop the last extension from *file_name*."""
    last_dot = file_name.rfind(".")
    if last_dot == -1:
        return file_name
    return file_name[:last_dot]


def join_path(parent: str, name: str) -> str:
    """Join relative POSIX path parts, tolerating an empty parent."""
    if not parent:
        return name
    return f"{parent}/{name}"
