"""
Abstract/concrete tag pair models.

An abstract tag is one whose word tokens appear contiguously inside a
longer, concrete tag ("1girl" inside "1girl smiling"). Pairs can be mined
from a collection and stored as presets for later pruning.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AbstractTagPair(BaseModel):
    """An ordered (abstract, concrete) tag pair."""

    abstract_tag: str = Field(..., alias="abstractTag")
    concrete_tag: str = Field(..., alias="concreteTag")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the pair for deduplication."""
        return (self.abstract_tag, self.concrete_tag)


class AbstractTagPairStat(AbstractTagPair):
    """A mined pair with its occurrence count and contributing records."""

    count: int = Field(default=0, ge=0)
    image_ids: list[str] = Field(default_factory=list, alias="imageIds")

    model_config = ConfigDict(frozen=False, populate_by_name=True)


class TagPresetFile(BaseModel):
    """On-disk shape of the preset pair file."""

    version: Literal[1] = 1
    pairs: list[AbstractTagPair] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
