"""
Regex configuration model.

Carries a pattern together with explicit flag switches instead of a
flag string. The regex builder turns it into the whole-string and
all-occurrences variants each call site needs.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field


class RegexOptions(BaseModel):
    """A pattern and its matching flags."""

    pattern: str = Field(..., description="Regular expression source")
    ignore_case: bool = Field(default=False)
    multiline: bool = Field(default=False)
    dot_all: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)

    @property
    def flags(self) -> int:
        """The ``re`` flag bits selected by this configuration."""
        flags = 0
        if self.ignore_case:
            flags |= re.IGNORECASE
        if self.multiline:
            flags |= re.MULTILINE
        if self.dot_all:
            flags |= re.DOTALL
        return flags
