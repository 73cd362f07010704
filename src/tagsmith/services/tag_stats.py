"""Tag frequency statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from tagsmith.models.enums import SortOrder, TagSortMode
from tagsmith.models.image_record import ImageRecord
from tagsmith.services.scope import ScopePredicate, include_all
from tagsmith.services.tag_edit import alphabetical_key


@dataclass
class TagStat:
    """A tag and the number of times it occurs."""

    tag: str
    count: int


def count_tags(
    images: list[ImageRecord], scope: ScopePredicate = include_all
) -> Counter[str]:
    """
    Count tag occurrences across the records in scope.

    Repeated tags within one record are counted each time. The counter
    iterates in first-seen order.
    """
    counts: Counter[str] = Counter()
    for index, image in enumerate(images):
        if scope(image, index):
            counts.update(image.tags)
    return counts


def build_all_tags_list(
    images: list[ImageRecord],
    search: str = "",
    sort_mode: TagSortMode = TagSortMode.FREQUENCY,
    order: SortOrder = SortOrder.DESC,
) -> list[TagStat]:
    """
    Build the all-tags listing.

    ``search`` filters tags by case-insensitive substring. Frequency mode
    sorts by descending count, keeping first-seen order for ties;
    alphabetical mode sorts A to Z. ``SortOrder.ASC`` reverses the result
    of either mode.
    """
    counts = count_tags(images)
    query = search.strip().lower()
    stats = [TagStat(tag=tag, count=count) for tag, count in counts.items()]
    if query:
        stats = [stat for stat in stats if query in stat.tag.lower()]
    if sort_mode == TagSortMode.ALPHABETICAL:
        stats.sort(key=lambda stat: alphabetical_key(stat.tag))
    else:
        stats.sort(key=lambda stat: -stat.count)
    if order == SortOrder.ASC:
        stats.reverse()
    return stats


def build_caption_preview(
    tags: list[str], separator: str, max_length: int = 110
) -> str:
    """Join *tags* and truncate to *max_length* characters with an ellipsis."""
    caption = separator.join(tags)
    if len(caption) <= max_length:
        return caption
    return f"{caption[: max_length - 3]}..."
