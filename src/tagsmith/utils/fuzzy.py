"""Fuzzy tag matching for "did you mean" suggestions.

When a rename or delete names a tag that no record carries, the CLI
offers the closest existing tags instead of silently doing nothing.
Closeness is Levenshtein (edit) distance; ties go to the more frequent
tag, then alphabetical order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional


def edit_distance(a: str, b: str, max_distance: Optional[int] = None) -> int:
    """
    Levenshtein distance between *a* and *b*.

    With ``max_distance`` the computation stops as soon as every partial
    row exceeds the bound and returns ``max_distance + 1``; callers that
    only care whether two tags are "close" avoid the full table.

    Examples
    --------
    >>> edit_distance("1gril", "1girl")
    2
    >>> edit_distance("smile", "smiling")
    3
    >>> edit_distance("kitten", "sitting", max_distance=1)
    2
    """
    if len(a) < len(b):
        a, b = b, a
    if max_distance is not None and len(a) - len(b) > max_distance:
        return max_distance + 1
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        if max_distance is not None and min(current) > max_distance:
            return max_distance + 1
        previous = current
    if max_distance is not None and previous[-1] > max_distance:
        return max_distance + 1
    return previous[-1]


def suggest_tags(
    query: str,
    tag_counts: Mapping[str, int],
    *,
    max_distance: int = 2,
    limit: int = 3,
) -> list[str]:
    """
    Suggest existing tags close to *query*.

    Comparison is case-insensitive; suggestions keep their original case.
    An exact (case-sensitive) hit is never suggested back.

    Examples
    --------
    >>> suggest_tags("1gril", {"1girl": 40, "1boy": 12, "girl": 3})
    ['1girl']
    """
    needle = query.strip().casefold()
    if not needle:
        return []
    scored: list[tuple[int, int, str, str]] = []
    for tag, count in tag_counts.items():
        if tag == query:
            continue
        distance = edit_distance(needle, tag.casefold(), max_distance)
        if distance <= max_distance:
            scored.append((distance, -count, tag.casefold(), tag))
    scored.sort()
    return [tag for _, _, _, tag in scored[:limit]]
