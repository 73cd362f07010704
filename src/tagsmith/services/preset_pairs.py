"""
Normalization and merging of preset abstract/concrete pairs.

Any layer that stores presets must round-trip them through
``normalize_pairs``: tags are trimmed, blank and self pairs are dropped,
duplicates collapse, and the result is sorted by abstract tag then
concrete tag.
"""

from __future__ import annotations

from collections.abc import Iterable

from tagsmith.models.tag_pair import AbstractTagPair
from tagsmith.services.tag_edit import alphabetical_key


def normalize_pairs(pairs: Iterable[AbstractTagPair]) -> list[AbstractTagPair]:
    """
    Return the canonical form of a pair list.

    Examples
    --------
    >>> raw = [
    ...     AbstractTagPair(abstract_tag=" cat ", concrete_tag="black cat"),
    ...     AbstractTagPair(abstract_tag="cat", concrete_tag="black cat"),
    ...     AbstractTagPair(abstract_tag="dog", concrete_tag="dog"),
    ... ]
    >>> [p.key for p in normalize_pairs(raw)]
    [('cat', 'black cat')]
    """
    unique: dict[tuple[str, str], AbstractTagPair] = {}
    for pair in pairs:
        abstract_tag = pair.abstract_tag.strip()
        concrete_tag = pair.concrete_tag.strip()
        if not abstract_tag or not concrete_tag or abstract_tag == concrete_tag:
            continue
        unique[(abstract_tag, concrete_tag)] = AbstractTagPair(
            abstract_tag=abstract_tag, concrete_tag=concrete_tag
        )
    return sorted(
        unique.values(),
        key=lambda pair: (
            alphabetical_key(pair.abstract_tag),
            alphabetical_key(pair.concrete_tag),
        ),
    )


def merge_preset_pairs(
    existing: Iterable[AbstractTagPair], incoming: Iterable[AbstractTagPair]
) -> list[AbstractTagPair]:
    """Merge two pair lists into one normalized list."""
    return normalize_pairs([*existing, *incoming])
