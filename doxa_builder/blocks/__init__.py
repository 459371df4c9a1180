"""
Blocs de contenu : exports publics, union discriminée par `type`, hydratation.
"""
import logging
from typing import Annotated, Any, Iterable, List, Union

from pydantic import Field, TypeAdapter, ValidationError

from .base import BaseBlock, ContentRecord, new_block_id, coerce_int
from .heading import HeadingBlock, HeadingContent
from .text import TextBlock, TextContent
from .image import ImageBlock, ImageContent
from .hero import HeroBlock, HeroContent
from .cards import CardsBlock, CardsContent, CardItem
from .features import FeaturesBlock, FeaturesContent, FeatureItem
from .banners import BannersBlock, BannersContent, BannerItem
from .cta import CTABlock, CTAContent
from .pilgrimages import PilgrimagesBlock, PilgrimagesContent
from .unknown import InvalidBlock, UnknownBlock

log = logging.getLogger(__name__)

# Union discriminée par type : ensemble fermé
BlockUnion = Annotated[
    Union[
        HeadingBlock,
        TextBlock,
        ImageBlock,
        HeroBlock,
        CardsBlock,
        FeaturesBlock,
        BannersBlock,
        CTABlock,
        PilgrimagesBlock,
    ],
    Field(discriminator="type"),
]

# Tout ce qu'une liste de sections peut contenir
Block = Union[BlockUnion, UnknownBlock]

BLOCK_CLASSES = {
    cls.model_fields["type"].default: cls
    for cls in (
        HeadingBlock, TextBlock, ImageBlock, HeroBlock, CardsBlock,
        FeaturesBlock, BannersBlock, CTABlock, PilgrimagesBlock,
    )
}
BLOCK_TYPES = tuple(BLOCK_CLASSES)

_ADAPTER = TypeAdapter(BlockUnion)


def parse_block(raw: Any) -> Block:
    """
    Instancie un bloc depuis son JSON stocké.
    Type inconnu → UnknownBlock (rendu en placeholder, jamais d'exception).
    """
    if isinstance(raw, BaseBlock):
        return raw
    data = dict(raw or {})
    block_type = data.get("type")
    if block_type not in BLOCK_CLASSES:
        log.warning("Bloc de type inconnu %r (id=%s) conservé tel quel", block_type, data.get("id"))
        return UnknownBlock(
            id=str(data.get("id") or ""),
            type=str(block_type or ""),
            content=data.get("content") if data.get("content") is not None else {},
            styles=data.get("styles") if isinstance(data.get("styles"), dict) else {},
        )
    try:
        return _ADAPTER.validate_python(data)
    except ValidationError as e:
        log.warning("Bloc %s (%s) illisible, conservé tel quel : %s", data.get("id"), block_type, e)
        return InvalidBlock(
            id=str(data.get("id") or ""),
            type=block_type,
            content=data.get("content") if data.get("content") is not None else {},
            styles=data.get("styles") if isinstance(data.get("styles"), dict) else {},
            error=str(e),
        )


def parse_blocks(raw: Iterable[Any]) -> List[Block]:
    return [parse_block(item) for item in (raw or [])]


__all__ = [
    "BaseBlock", "ContentRecord", "new_block_id", "coerce_int",
    "HeadingBlock", "HeadingContent",
    "TextBlock", "TextContent",
    "ImageBlock", "ImageContent",
    "HeroBlock", "HeroContent",
    "CardsBlock", "CardsContent", "CardItem",
    "FeaturesBlock", "FeaturesContent", "FeatureItem",
    "BannersBlock", "BannersContent", "BannerItem",
    "CTABlock", "CTAContent",
    "PilgrimagesBlock", "PilgrimagesContent",
    "UnknownBlock", "InvalidBlock",
    "BlockUnion", "Block", "BLOCK_CLASSES", "BLOCK_TYPES",
    "parse_block", "parse_blocks",
]
