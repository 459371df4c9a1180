"""
Base des blocs de contenu.

Un bloc = {id, type, content, styles}. Le `type` est figé à la création
(changer de type = supprimer + ajouter). Le `content` est un enregistrement
typé propre à chaque type, `styles` un dict CSS fusionné sur le conteneur.
"""
import uuid
from typing import Any, Dict, Optional, get_args

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def new_block_id(block_type: str = "block") -> str:
    return f"{block_type or 'block'}-{uuid.uuid4().hex[:12]}"


def coerce_int(value: Any, default: Optional[int], lo: Optional[int] = None, hi: Optional[int] = None):
    """Entier depuis une saisie de formulaire ; valeur illisible → défaut, silencieusement."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        n = int(float(value)) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if lo is not None:
        n = max(lo, n)
    if hi is not None:
        n = min(hi, n)
    return n


def coerce_choice(cls, value: Any, field_name: str):
    """Valeur hors du Literal du champ → défaut du champ."""
    field = cls.model_fields[field_name]
    return value if value in get_args(field.annotation) else field.default


class ContentRecord(BaseModel):
    """
    Enregistrement de contenu. Tolérant : clés inconnues ignorées, `null` → défaut,
    clés camelCase (anciens documents) acceptées à la lecture.
    """
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=AliasGenerator(validation_alias=to_camel),
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class BaseBlock(BaseModel):
    """Bloc de base (classe parente de tous les types)."""
    id: str = ""
    type: str = Field(frozen=True)
    content: Any = None
    styles: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _drop_null_parts(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (k in ("content", "styles") and v is None)}
        return data

    @model_validator(mode="after")
    def _ensure_id(self):
        if not self.id:
            self.id = new_block_id(self.type)
        return self

    def to_json(self) -> dict:
        return self.model_dump(mode="json")
