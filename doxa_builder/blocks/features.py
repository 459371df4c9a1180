"""Bloc Features : liste de points forts avec icône."""
from typing import List, Literal

from pydantic import Field

from .base import BaseBlock, ContentRecord


class FeatureItem(ContentRecord):
    title: str = ""
    description: str = ""
    icon: str = ""


class FeaturesContent(ContentRecord):
    title: str = ""
    subtitle: str = ""
    features: List[FeatureItem] = Field(default_factory=list)


class FeaturesBlock(BaseBlock):
    type: Literal["features"] = Field("features", frozen=True)
    content: FeaturesContent = Field(default_factory=FeaturesContent)
