"""Bloc Banners : bannières promotionnelles en carrousel ou en grille."""
from typing import List, Literal

from pydantic import Field, field_validator

from .base import BaseBlock, ContentRecord, coerce_choice


class BannerItem(ContentRecord):
    image: str = ""
    title: str = ""
    description: str = ""
    link_url: str = ""


class BannersContent(ContentRecord):
    title: str = ""
    subtitle: str = ""
    display_type: Literal["carousel", "grid"] = "carousel"
    banners: List[BannerItem] = Field(default_factory=list)

    @field_validator("display_type", mode="before")
    @classmethod
    def _display_type(cls, v):
        return coerce_choice(cls, v, "display_type")


class BannersBlock(BaseBlock):
    type: Literal["banners"] = Field("banners", frozen=True)
    content: BannersContent = Field(default_factory=BannersContent)
