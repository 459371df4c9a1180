"""Bloc Hero : image de fond, overlay optionnel, formulaire de recherche de pèlerinages."""
from typing import Literal

from pydantic import Field, field_validator

from .base import BaseBlock, ContentRecord, coerce_int


class HeroContent(ContentRecord):
    title: str = ""
    subtitle: str = ""
    background_image: str = ""
    height: int = 400
    show_overlay: bool = True
    overlay_color: str = "rgba(0,0,0,0.5)"
    overlay_opacity: int = 50
    show_search_filter: bool = True

    @field_validator("height", mode="before")
    @classmethod
    def _height(cls, v):
        return coerce_int(v, 400, lo=0)

    @field_validator("overlay_opacity", mode="before")
    @classmethod
    def _opacity(cls, v):
        return coerce_int(v, 50, lo=0, hi=100)


class HeroBlock(BaseBlock):
    type: Literal["hero"] = Field("hero", frozen=True)
    content: HeroContent = Field(default_factory=HeroContent)
