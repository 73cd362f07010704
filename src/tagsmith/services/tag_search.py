"""
Text search and find-and-replace over serialized captions.

Matching runs against the caption string (tags joined by the caller's
separator), so a search can span tag boundaries. Whole-tag mode instead
compares each tag on its own, by equality or by a full-match regex.

After a replacement the caption is split back into tags *without*
trimming or dropping empty pieces. Normal caption parsing trims; the
difference is deliberate so the exact text produced by the replacement
survives (replacing ``"b"`` with ``""`` in ``"a, b"`` leaves the tags
``["a", ""]``, and a later "remove empty tags" cleans that up).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from tagsmith.exceptions import InvalidPatternError
from tagsmith.models.image_record import ImageRecord
from tagsmith.models.regex_options import RegexOptions
from tagsmith.models.tag_change import TagChange
from tagsmith.services.caption_format import format_caption, split_caption
from tagsmith.services.regex_builder import (
    build_full_match_regex,
    build_global_regex,
    matches_whole,
)
from tagsmith.services.scope import ScopePredicate, include_all

logger = logging.getLogger(__name__)


@dataclass
class TextSearchOptions:
    """How to match search text against records."""

    tag_separator: str
    scope: ScopePredicate = include_all
    whole_tags_only: bool = False
    use_regex: bool = False
    ignore_case: bool = False
    multiline: bool = False
    dot_all: bool = False

    def regex_options(self, pattern: str) -> RegexOptions:
        """Combine *pattern* with the configured regex flags."""
        return RegexOptions(
            pattern=pattern,
            ignore_case=self.ignore_case,
            multiline=self.multiline,
            dot_all=self.dot_all,
        )


@dataclass
class FindReplaceOptions(TextSearchOptions):
    """How to match and replace text in records."""


def count_occurrences(text: str, needle: str) -> int:
    """Count non-overlapping occurrences of *needle*, scanning forward."""
    if not needle:
        return 0
    return text.count(needle)


def count_regex_matches(text: str, regex: re.Pattern[str]) -> int:
    """Count every match of *regex* in *text*."""
    return sum(1 for _ in regex.finditer(text))


def get_text_match_count(
    images: list[ImageRecord], text: str, options: TextSearchOptions
) -> int:
    """
    Count matches of *text* across the records in scope.

    Returns
    -------
    int
        Total matches. Empty search text counts zero.

    Raises
    ------
    InvalidPatternError
        If regex mode is on and *text* does not compile.
    """
    if not text:
        return 0
    regex: re.Pattern[str] | None = None
    if options.use_regex:
        pattern = options.regex_options(text)
        if options.whole_tags_only:
            regex = build_full_match_regex(pattern)
        else:
            regex = build_global_regex(pattern)

    total = 0
    for index, image in enumerate(images):
        if not options.scope(image, index):
            continue
        if options.whole_tags_only:
            if regex is not None:
                total += sum(1 for tag in image.tags if matches_whole(regex, tag))
            else:
                total += sum(1 for tag in image.tags if tag == text)
            continue
        caption = format_caption(image.tags, options.tag_separator)
        if regex is not None:
            total += count_regex_matches(caption, regex)
        else:
            total += count_occurrences(caption, text)
    return total


def _replace_literal(text: str, find_text: str, replace_text: str) -> str:
    if not find_text:
        return text
    return replace_text.join(text.split(find_text))


def _substitute(regex: re.Pattern[str], replace_text: str, text: str) -> str:
    try:
        return regex.sub(replace_text, text)
    except re.error as e:
        raise InvalidPatternError(
            regex.pattern,
            original_error=e,
            message=f"Invalid replacement {replace_text!r}: {e}",
        ) from e


def _replace_whole_tags(
    tags: list[str],
    find_text: str,
    replace_text: str,
    regex: re.Pattern[str] | None,
) -> list[str]:
    if regex is None:
        return [replace_text if tag == find_text else tag for tag in tags]
    replaced = []
    for tag in tags:
        match = regex.fullmatch(tag)
        if match is None:
            replaced.append(tag)
            continue
        try:
            replaced.append(match.expand(replace_text))
        except re.error as e:
            raise InvalidPatternError(
                regex.pattern,
                original_error=e,
                message=f"Invalid replacement {replace_text!r}: {e}",
            ) from e
    return replaced


def find_and_replace_in_images(
    images: list[ImageRecord],
    find_text: str,
    replace_text: str,
    options: FindReplaceOptions,
) -> TagChange:
    """
    Replace every occurrence of *find_text* in the captions in scope.

    Literal mode replaces every exact occurrence. Regex mode substitutes
    every match, and *replace_text* may refer to groups with Python
    template syntax (``\\1``, ``\\g<name>``). Whole-tag mode only rewrites
    tags that equal (or fully match) *find_text*.

    A record is reported as changed only if its caption string changed.

    Raises
    ------
    InvalidPatternError
        If regex mode is on and the pattern or the replacement template is
        invalid. Nothing is returned in that case, so no partial result
        escapes.
    """
    if not find_text:
        return TagChange(images=images, changed_ids=[])

    regex: re.Pattern[str] | None = None
    if options.use_regex:
        pattern = options.regex_options(find_text)
        if options.whole_tags_only:
            regex = build_full_match_regex(pattern)
        else:
            regex = build_global_regex(pattern)

    separator = options.tag_separator
    changed_ids: list[str] = []
    next_images: list[ImageRecord] = []
    for index, image in enumerate(images):
        if not options.scope(image, index):
            next_images.append(image)
            continue
        caption = format_caption(image.tags, separator)
        if options.whole_tags_only:
            next_caption = format_caption(
                _replace_whole_tags(image.tags, find_text, replace_text, regex),
                separator,
            )
        elif regex is not None:
            next_caption = _substitute(regex, replace_text, caption)
        else:
            next_caption = _replace_literal(caption, find_text, replace_text)
        if next_caption == caption:
            next_images.append(image)
            continue
        changed_ids.append(image.id)
        next_tags = split_caption(next_caption, separator, trim=False)
        next_images.append(image.with_tags(next_tags))

    logger.debug(
        "Find and replace %r -> %r changed %d records",
        find_text,
        replace_text,
        len(changed_ids),
    )
    return TagChange(images=next_images, changed_ids=changed_ids)
