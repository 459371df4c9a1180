"""Bloc Cards : grille de cartes statiques ou alimentées par le flux pèlerinages."""
from typing import List, Literal

from pydantic import Field

from .base import BaseBlock, ContentRecord


class CardItem(ContentRecord):
    title: str = ""
    description: str = ""
    image_url: str = ""


class CardsContent(ContentRecord):
    title: str = ""
    subtitle: str = ""
    from_feed: bool = False
    cards: List[CardItem] = Field(default_factory=list)


class CardsBlock(BaseBlock):
    type: Literal["cards"] = Field("cards", frozen=True)
    content: CardsContent = Field(default_factory=CardsContent)
