"""Bloc Heading : titre simple."""
from typing import Literal

from pydantic import Field, field_validator

from .base import BaseBlock, ContentRecord, coerce_choice, coerce_int

Alignment = Literal["left", "center", "right"]


class HeadingContent(ContentRecord):
    text: str = ""
    size: int = 24
    color: str = "#000000"
    alignment: Alignment = "left"

    @field_validator("size", mode="before")
    @classmethod
    def _size(cls, v):
        return coerce_int(v, 24, lo=1)

    @field_validator("alignment", mode="before")
    @classmethod
    def _alignment(cls, v):
        return coerce_choice(cls, v, "alignment")


class HeadingBlock(BaseBlock):
    type: Literal["heading"] = Field("heading", frozen=True)
    content: HeadingContent = Field(default_factory=HeadingContent)
