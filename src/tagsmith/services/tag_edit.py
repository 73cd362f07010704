"""
Tag-list edit primitives.

Pure functions from one ordered tag list to another. None of them mutates
its input, and every one of them returns the *input list itself* when the
result would be equal to it. Callers can therefore test ``result is tags``
as a fast path, but change detection upstream always falls back to a
value comparison.

Order-only operations (sort, reverse, shuffle) short-circuit on lists
shorter than two tags. ``keep_first`` pins index 0 in place and applies
the operation to the remainder only.
"""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Callable, Collection, Iterable, Mapping

from tagsmith.services.regex_builder import (
    PatternInput,
    build_full_match_regex,
    matches_whole,
)

TagCounts = Mapping[str, int]
RandomSource = Callable[[], float]


def _unchanged_or(tags: list[str], candidate: list[str]) -> list[str]:
    return tags if candidate == tags else candidate


def alphabetical_key(tag: str) -> tuple[str, str]:
    """
    Sort key for alphabetical tag ordering.

    Case-insensitive first, raw string second, so ``"Apple"`` and
    ``"apple"`` sit together and always land in the same relative order.
    """
    return (tag.casefold(), tag)


def add_tags(tags: list[str], tags_to_add: Iterable[str]) -> list[str]:
    """Append tags verbatim; duplicates are kept."""
    additions = list(tags_to_add)
    if not additions:
        return tags
    return tags + additions


def remove_tags(tags: list[str], tags_to_remove: Collection[str]) -> list[str]:
    """Drop every tag that is in *tags_to_remove*."""
    if not tags_to_remove:
        return tags
    remove_set = set(tags_to_remove)
    return _unchanged_or(tags, [tag for tag in tags if tag not in remove_set])


def rename_tags(
    tags: list[str], old_tags: Collection[str], new_tag: str
) -> list[str]:
    """Replace every occurrence of any of *old_tags* with *new_tag* in place."""
    if not old_tags:
        return tags
    old_set = set(old_tags)
    return _unchanged_or(tags, [new_tag if tag in old_set else tag for tag in tags])


def rename_tags_by_regex(
    tags: list[str], pattern: PatternInput, new_tag: str
) -> list[str]:
    """
    Replace every tag matched in full by *pattern* with *new_tag*.

    Raises
    ------
    InvalidPatternError
        If the pattern does not compile.
    """
    full_match = build_full_match_regex(pattern)
    return _unchanged_or(
        tags, [new_tag if matches_whole(full_match, tag) else tag for tag in tags]
    )


def remove_tags_by_regex(tags: list[str], pattern: PatternInput) -> list[str]:
    """
    Drop every tag matched in full by *pattern*.

    Raises
    ------
    InvalidPatternError
        If the pattern does not compile.
    """
    full_match = build_full_match_regex(pattern)
    return _unchanged_or(
        tags, [tag for tag in tags if not matches_whole(full_match, tag)]
    )


def sort_tags_alphabetically(tags: list[str], keep_first: bool) -> list[str]:
    """Sort tags alphabetically, optionally pinning the first tag."""
    if len(tags) < 2:
        return tags
    if keep_first:
        candidate = [tags[0], *sorted(tags[1:], key=alphabetical_key)]
    else:
        candidate = sorted(tags, key=alphabetical_key)
    return _unchanged_or(tags, candidate)


def sort_tags_by_frequency(
    tags: list[str], counts: TagCounts, keep_first: bool
) -> list[str]:
    """
    Sort tags by descending count from *counts*.

    Tags missing from *counts* count as zero. The sort is stable: tags with
    equal counts keep their current relative order.
    """
    if len(tags) < 2:
        return tags

    def by_count(tag: str) -> int:
        return -counts.get(tag, 0)

    if keep_first:
        candidate = [tags[0], *sorted(tags[1:], key=by_count)]
    else:
        candidate = sorted(tags, key=by_count)
    return _unchanged_or(tags, candidate)


def reverse_tags(tags: list[str], keep_first: bool) -> list[str]:
    """Reverse tag order, optionally pinning the first tag."""
    if len(tags) < 2:
        return tags
    if keep_first:
        candidate = [tags[0], *reversed(tags[1:])]
    else:
        candidate = list(reversed(tags))
    return _unchanged_or(tags, candidate)


def shuffle_tags(
    tags: list[str],
    keep_first: bool,
    rng: RandomSource = random.random,
) -> list[str]:
    """
    Fisher-Yates shuffle driven by *rng*.

    *rng* must return floats in ``[0, 1)``; pass a deterministic source in
    tests. With ``keep_first`` only positions after index 0 are shuffled.
    """
    if len(tags) < 2:
        return tags
    start = 1 if keep_first else 0
    candidate = list(tags)
    for i in range(len(candidate) - 1, start, -1):
        j = int(rng() * (i - start + 1)) + start
        candidate[i], candidate[j] = candidate[j], candidate[i]
    return _unchanged_or(tags, candidate)


def move_tags_to_front(tags: list[str], tags_to_move: Iterable[str]) -> list[str]:
    """
    Move every occurrence of the listed tags to the front.

    Moved tags appear in move-list order, each repeated as often as it
    occurred; all other tags follow in their original relative order.
    Repeats in the move list are ignored after their first mention.

    Examples
    --------
    >>> move_tags_to_front(["b", "a", "c", "a"], ["a"])
    ['a', 'a', 'b', 'c']
    """
    order = list(dict.fromkeys(tags_to_move))
    if not order:
        return tags
    move_set = set(order)
    if not any(tag in move_set for tag in tags):
        return tags
    occurrences = Counter(tag for tag in tags if tag in move_set)
    moved = [tag for tag in order for _ in range(occurrences[tag])]
    unmoved = [tag for tag in tags if tag not in move_set]
    return _unchanged_or(tags, moved + unmoved)


def remove_duplicate_tags(tags: list[str]) -> list[str]:
    """Keep the first occurrence of each tag and drop later repeats."""
    return _unchanged_or(tags, list(dict.fromkeys(tags)))


def remove_empty_tags(tags: list[str]) -> list[str]:
    """Drop tags that are empty or whitespace-only."""
    return _unchanged_or(tags, [tag for tag in tags if tag.strip()])
