"""
Abstract/concrete tag pair mining and pruning.

Within one record, tag A is an *abstraction* of tag B when A's whitespace
tokens appear as a contiguous run inside B's tokens: ``"1girl"`` is an
abstraction of ``"1girl smiling"``, and ``"red dress"`` of ``"long red
dress"``. Tokens compare exactly; ``"cat"`` is not an abstraction of
``"category"``.

Candidates are ordered by string length, shortest first, and only a
shorter (or equally long but earlier) tag can be the abstract side of a
pair. Instead of testing every pair of tags, each record builds an index
from token runs to tag positions and looks up every contiguous run of
each longer tag, which keeps the cost proportional to the tokens actually
present.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tagsmith.models.image_record import ImageRecord
from tagsmith.models.tag_change import TagChange
from tagsmith.models.tag_pair import AbstractTagPair, AbstractTagPairStat
from tagsmith.services.scope import ScopePredicate, include_all
from tagsmith.services.tag_batch import update_images_in_scope
from tagsmith.services.tag_edit import alphabetical_key

logger = logging.getLogger(__name__)

TokenRun = tuple[str, ...]


def tokenize(tag: str) -> TokenRun:
    """Split a tag into whitespace-delimited tokens."""
    return tuple(tag.split())


def contains_token_sequence(concrete_tag: str, abstract_tag: str) -> bool:
    """
    Return True if the abstract tag's tokens occur contiguously in the concrete tag.

    Examples
    --------
    >>> contains_token_sequence("long red dress", "red dress")
    True
    >>> contains_token_sequence("long red dress", "long dress")
    False
    """
    abstract_tokens = tokenize(abstract_tag)
    concrete_tokens = tokenize(concrete_tag)
    size = len(abstract_tokens)
    if size == 0 or size > len(concrete_tokens):
        return False
    return any(
        concrete_tokens[start : start + size] == abstract_tokens
        for start in range(len(concrete_tokens) - size + 1)
    )


def _token_runs(tokens: TokenRun) -> set[TokenRun]:
    return {
        tokens[start:end]
        for start in range(len(tokens))
        for end in range(start + 1, len(tokens) + 1)
    }


def find_abstract_tag_pairs(tags: list[str]) -> list[AbstractTagPair]:
    """
    Find every abstract/concrete pair inside one record's tags.

    Tags are deduplicated, blank tags are dropped, and the rest are ordered
    by length (stable, so equal lengths keep record order). Pairs come out
    ordered by the position of the abstract tag, then of the concrete tag.

    Examples
    --------
    >>> [p.key for p in find_abstract_tag_pairs(["1girl", "1girl smiling", "cat"])]
    [('1girl', '1girl smiling')]
    """
    unique = [tag for tag in dict.fromkeys(tags) if tag.strip()]
    if len(unique) < 2:
        return []
    ordered = sorted(unique, key=len)
    tokens = [tokenize(tag) for tag in ordered]

    positions_by_run: dict[TokenRun, list[int]] = {}
    for position, run in enumerate(tokens):
        positions_by_run.setdefault(run, []).append(position)

    found: set[tuple[int, int]] = set()
    for concrete_pos, concrete_tokens in enumerate(tokens):
        for run in _token_runs(concrete_tokens):
            for abstract_pos in positions_by_run.get(run, ()):
                if abstract_pos < concrete_pos:
                    found.add((abstract_pos, concrete_pos))

    return [
        AbstractTagPair(abstract_tag=ordered[i], concrete_tag=ordered[j])
        for i, j in sorted(found)
    ]


def collect_abstract_tag_pairs_in_images(
    images: list[ImageRecord], scope: ScopePredicate = include_all
) -> list[AbstractTagPairStat]:
    """
    Aggregate pairs across the records in scope.

    Each pair is counted once per record that contains it, and the
    contributing record ids are kept in record order. Pairs are returned
    in the order they were first seen. The work is quadratic in the
    number of tags per record, so large collections should be scoped.
    """
    stats: dict[tuple[str, str], AbstractTagPairStat] = {}
    for index, image in enumerate(images):
        if not scope(image, index):
            continue
        for pair in find_abstract_tag_pairs(image.tags):
            entry = stats.get(pair.key)
            if entry is None:
                entry = AbstractTagPairStat(
                    abstract_tag=pair.abstract_tag,
                    concrete_tag=pair.concrete_tag,
                )
                stats[pair.key] = entry
            entry.count += 1
            entry.image_ids.append(image.id)
    logger.debug("Collected %d abstract tag pairs", len(stats))
    return list(stats.values())


def build_pair_map(pairs: Iterable[AbstractTagPair]) -> dict[str, set[str]]:
    """Map each abstract tag to its concrete partners, skipping blank tags."""
    mapping: dict[str, set[str]] = {}
    for pair in pairs:
        if not pair.abstract_tag.strip() or not pair.concrete_tag.strip():
            continue
        mapping.setdefault(pair.abstract_tag, set()).add(pair.concrete_tag)
    return mapping


def remove_abstract_tags(tags: list[str], pair_map: dict[str, set[str]]) -> list[str]:
    """
    Drop abstract tags whose concrete partner is also present.

    An abstract tag is removed (every occurrence of it) only when at least
    one of its mapped concrete tags is in *tags*. Everything else stays.
    """
    if not tags:
        return tags
    present = set(tags)
    to_remove = {
        abstract_tag
        for abstract_tag, concrete_tags in pair_map.items()
        if abstract_tag in present and not present.isdisjoint(concrete_tags)
    }
    if not to_remove:
        return tags
    return [tag for tag in tags if tag not in to_remove]


def remove_abstract_tags_by_pairs_in_images(
    images: list[ImageRecord],
    pairs: Iterable[AbstractTagPair],
    scope: ScopePredicate = include_all,
) -> TagChange:
    """Prune abstract tags from the records in scope using *pairs*."""
    pair_map = build_pair_map(pairs)
    if not pair_map:
        return TagChange(images=images, changed_ids=[])
    return update_images_in_scope(
        images, scope, lambda tags, image: remove_abstract_tags(tags, pair_map)
    )


@dataclass
class AbstractConflictItem:
    """One mined pair as shown in the conflicts listing."""

    abstract_tag: str
    concrete_tag: str
    count: int
    image_ids: list[str]
    is_preset: bool


@dataclass
class AbstractConflictGroup:
    """All mined pairs sharing one abstract tag."""

    abstract_tag: str
    total_count: int = 0
    items: list[AbstractConflictItem] = field(default_factory=list)


def group_abstract_conflicts(
    stats: Iterable[AbstractTagPairStat],
    preset_pairs: Iterable[AbstractTagPair] = (),
) -> list[AbstractConflictGroup]:
    """
    Group mined pairs by abstract tag for review.

    Items within a group are ordered by count (highest first), then by
    concrete tag; groups by total count, then by abstract tag. Items that
    are already stored as presets are flagged.
    """
    preset_keys = {pair.key for pair in preset_pairs}
    groups: dict[str, AbstractConflictGroup] = {}
    for stat in stats:
        group = groups.setdefault(
            stat.abstract_tag, AbstractConflictGroup(abstract_tag=stat.abstract_tag)
        )
        group.items.append(
            AbstractConflictItem(
                abstract_tag=stat.abstract_tag,
                concrete_tag=stat.concrete_tag,
                count=stat.count,
                image_ids=list(stat.image_ids),
                is_preset=stat.key in preset_keys,
            )
        )
        group.total_count += stat.count

    for group in groups.values():
        group.items.sort(
            key=lambda item: (-item.count, alphabetical_key(item.concrete_tag))
        )
    return sorted(
        groups.values(),
        key=lambda group: (-group.total_count, alphabetical_key(group.abstract_tag)),
    )
