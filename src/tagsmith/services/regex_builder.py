"""
Regex construction for tag and caption matching.

Call sites need one of two variants of a user pattern:

- a *search* regex, used to count or replace every occurrence inside a
  serialized caption;
- a *full-match* regex, used against a single tag, where the pattern must
  cover the whole tag (``cat`` matches ``"cat"`` but not ``"cats"``).

Both are built from a ``RegexOptions`` so no flag strings are ever parsed
or patched. Compile failures surface as ``InvalidPatternError`` before any
record is touched.
"""

from __future__ import annotations

import logging
import re
from typing import Union

from tagsmith.exceptions import InvalidPatternError
from tagsmith.models.regex_options import RegexOptions

logger = logging.getLogger(__name__)

PatternInput = Union[str, RegexOptions, re.Pattern[str]]


def _as_options(pattern_input: PatternInput) -> RegexOptions:
    if isinstance(pattern_input, RegexOptions):
        return pattern_input
    if isinstance(pattern_input, re.Pattern):
        return RegexOptions(
            pattern=pattern_input.pattern,
            ignore_case=bool(pattern_input.flags & re.IGNORECASE),
            multiline=bool(pattern_input.flags & re.MULTILINE),
            dot_all=bool(pattern_input.flags & re.DOTALL),
        )
    return RegexOptions(pattern=pattern_input)


def _compile(source: str, flags: int, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(source, flags)
    except re.error as e:
        logger.debug("Rejected regex pattern %r: %s", pattern, e)
        raise InvalidPatternError(pattern, original_error=e) from e


def compile_pattern(pattern_input: PatternInput) -> re.Pattern[str]:
    """
    Compile a pattern exactly as given.

    Parameters
    ----------
    pattern_input : str | RegexOptions | re.Pattern
        The pattern source, a full options object, or a compiled pattern.

    Returns
    -------
    re.Pattern
        The compiled pattern.

    Raises
    ------
    InvalidPatternError
        If the pattern does not compile.
    """
    options = _as_options(pattern_input)
    return _compile(options.pattern, options.flags, options.pattern)


def build_global_regex(pattern_input: PatternInput) -> re.Pattern[str]:
    """
    Build the regex used to find every occurrence inside a caption.

    Python patterns have no global flag; ``finditer`` and ``sub`` already
    visit every non-overlapping match, so this is the plain compile. It is
    kept as a named variant so search call sites say what they mean.
    """
    return compile_pattern(pattern_input)


def build_full_match_regex(pattern_input: PatternInput) -> re.Pattern[str]:
    """
    Build a regex that must match an entire tag.

    The pattern is wrapped in a non-capturing group so alternations stay
    anchored as a unit (``cat|dog`` matches ``"dog"`` but not
    ``"hotdog"``). Use the result with ``re.Pattern.fullmatch`` or the
    ``matches_whole`` helper.

    Examples
    --------
    >>> rx = build_full_match_regex("cat")
    >>> matches_whole(rx, "cat"), matches_whole(rx, "cats")
    (True, False)
    """
    options = _as_options(pattern_input)
    return _compile(f"(?:{options.pattern})", options.flags, options.pattern)


def matches_whole(regex: re.Pattern[str], text: str) -> bool:
    """Return True when *regex* matches all of *text*."""
    return regex.fullmatch(text) is not None
