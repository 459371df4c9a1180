"""Bloc de type inconnu : conservé tel quel pour ne rien perdre au prochain save."""
from typing import Any

from pydantic import Field

from .base import BaseBlock


class UnknownBlock(BaseBlock):
    type: str = Field("", frozen=True)
    content: Any = Field(default_factory=dict)


class InvalidBlock(UnknownBlock):
    """Bloc d'un type connu dont le contenu stocké est illisible : gardé brut, rendu en placeholder."""
    error: str = Field("", exclude=True)
