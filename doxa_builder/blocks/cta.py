"""Bloc CTA : appel à l'action, bouton unique."""
from typing import Literal

from pydantic import Field

from .base import BaseBlock, ContentRecord


class CTAContent(ContentRecord):
    title: str = ""
    subtitle: str = ""
    button_text: str = ""
    button_url: str = ""
    background_color: str = "#f8fafc"
    text_color: str = "#1e293b"


class CTABlock(BaseBlock):
    type: Literal["cta"] = Field("cta", frozen=True)
    content: CTAContent = Field(default_factory=CTAContent)
