"""Bloc Image : image unique, largeur en % du conteneur."""
from typing import Literal

from pydantic import Field, field_validator

from .base import BaseBlock, ContentRecord, coerce_choice, coerce_int
from .heading import Alignment


class ImageContent(ContentRecord):
    url: str = ""
    alt: str = ""
    width: int = 100
    alignment: Alignment = "center"

    @field_validator("width", mode="before")
    @classmethod
    def _width(cls, v):
        return coerce_int(v, 100, lo=10, hi=100)

    @field_validator("alignment", mode="before")
    @classmethod
    def _alignment(cls, v):
        return coerce_choice(cls, v, "alignment")


class ImageBlock(BaseBlock):
    type: Literal["image"] = Field("image", frozen=True)
    content: ImageContent = Field(default_factory=ImageContent)
