"""Bloc Text : paragraphe."""
from typing import Literal

from pydantic import Field, field_validator

from .base import BaseBlock, ContentRecord, coerce_choice, coerce_int
from .heading import Alignment


class TextContent(ContentRecord):
    text: str = ""
    size: int = 16
    color: str = "#000000"
    alignment: Alignment = "left"
    line_height: str = "1.5"

    @field_validator("size", mode="before")
    @classmethod
    def _size(cls, v):
        return coerce_int(v, 16, lo=1)

    @field_validator("alignment", mode="before")
    @classmethod
    def _alignment(cls, v):
        return coerce_choice(cls, v, "alignment")

    @field_validator("line_height", mode="before")
    @classmethod
    def _line_height(cls, v):
        return str(v)


class TextBlock(BaseBlock):
    type: Literal["text"] = Field("text", frozen=True)
    content: TextContent = Field(default_factory=TextContent)
