"""Bloc Pilgrimages : flux live de pèlerinages (rien n'est stocké en ligne)."""
from typing import Literal, Optional

from pydantic import Field, field_validator

from .base import BaseBlock, ContentRecord, coerce_int


class PilgrimagesContent(ContentRecord):
    title: str = ""
    subtitle: str = ""
    count: int = 6
    show_promoted: bool = True
    background_color: Optional[str] = None
    text_color: Optional[str] = None

    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, v):
        return coerce_int(v, 6, lo=1, hi=24)


class PilgrimagesBlock(BaseBlock):
    type: Literal["pilgrimages"] = Field("pilgrimages", frozen=True)
    content: PilgrimagesContent = Field(default_factory=PilgrimagesContent)
