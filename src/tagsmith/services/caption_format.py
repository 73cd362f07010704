"""Conversion between caption strings and tag lists."""

from __future__ import annotations


def split_caption(caption: str, separator: str, trim: bool = True) -> list[str]:
    """
    Split a caption into tags.

    With ``trim`` (the normal parsing mode) every tag is stripped and empty
    tags are dropped. Without it the raw pieces are returned untouched,
    which find-and-replace relies on to keep the exact text it produced.

    An empty separator cannot split anything, so the whole caption becomes
    a single piece.

    Examples
    --------
    >>> split_caption(" a, b,, c ", ", ")
    ['a', 'b,', 'c']
    >>> split_caption("a, , b", ", ", trim=False)
    ['a', '', 'b']
    """
    if not caption:
        return []
    parts = caption.split(separator) if separator else [caption]
    if not trim:
        return parts
    return [stripped for stripped in (part.strip() for part in parts) if stripped]


def parse_caption(caption: str, separator: str) -> list[str]:
    """Parse a caption into trimmed, non-empty tags."""
    return split_caption(caption, separator, trim=True)


def format_caption(tags: list[str], separator: str) -> str:
    """Join tags into a caption string."""
    return separator.join(tags)
