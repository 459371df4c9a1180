"""
Registry des blocs : type → (contenu par défaut, champs du formulaire d'édition).

Table fermée, connue statiquement. Chaque champ déclare son défaut de repli :
le formulaire est toujours pré-rempli avec une forme complète, de sorte que
`update_content` reçoit toujours un contenu valide.
"""
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Type

from .blocks import (
    BLOCK_CLASSES,
    BaseBlock,
    ContentRecord,
    UnknownBlock,
)
from .exceptions import UnknownBlockType


class FormField(NamedTuple):
    name: str
    label: str
    kind: str = "text"                        # text | textarea | number | color | select | checkbox | list
    options: Tuple[str, ...] = ()
    item_fields: Tuple["FormField", ...] = ()  # kind == "list" uniquement


class BlockSpec(NamedTuple):
    type: str
    label: str
    block_cls: Type[BaseBlock]
    defaults: Dict[str, Any]
    fields: Tuple[FormField, ...]

    @property
    def content_cls(self) -> Type[ContentRecord]:
        return self.block_cls.model_fields["content"].annotation


_ALIGN = ("left", "center", "right")

_CARD_FIELDS = (
    FormField("title", "Titlu"),
    FormField("description", "Descriere", "textarea"),
    FormField("image_url", "URL Imagine"),
)
_FEATURE_FIELDS = (
    FormField("title", "Titlu"),
    FormField("description", "Descriere", "textarea"),
    FormField("icon", "Iconiță"),
)
_BANNER_FIELDS = (
    FormField("image", "Imagine URL"),
    FormField("title", "Titlu"),
    FormField("description", "Descriere", "textarea"),
    FormField("link_url", "Link"),
)

_SPECS: Dict[str, BlockSpec] = {}


def _register(block_type: str, label: str, defaults: Dict[str, Any], *fields: FormField):
    _SPECS[block_type] = BlockSpec(block_type, label, BLOCK_CLASSES[block_type], defaults, fields)


_register(
    "heading", "Titlu",
    {"text": "Titlu Nou", "size": 32, "color": "#000000", "alignment": "left"},
    FormField("text", "Text titlu"),
    FormField("size", "Mărime (px)", "number"),
    FormField("color", "Culoare", "color"),
    FormField("alignment", "Aliniere", "select", _ALIGN),
)
_register(
    "text", "Text",
    {"text": "Introduceți text aici..."},
    FormField("text", "Conținut text", "textarea"),
    FormField("size", "Mărime (px)", "number"),
    FormField("color", "Culoare", "color"),
    FormField("alignment", "Aliniere", "select", _ALIGN),
    FormField("line_height", "Înălțime rând"),
)
_register(
    "image", "Imagine",
    {},
    FormField("url", "URL Imagine"),
    FormField("alt", "Text alternativ"),
    FormField("width", "Lățime (%)", "number"),
    FormField("alignment", "Aliniere", "select", _ALIGN),
)
_register(
    "hero", "Hero",
    {"title": "Titlu secțiune Hero", "subtitle": "Subtitlu secțiune Hero"},
    FormField("title", "Titlu hero"),
    FormField("subtitle", "Subtitlu"),
    FormField("background_image", "Imagine fundal URL"),
    FormField("height", "Înălțime (px)", "number"),
    FormField("show_overlay", "Overlay", "checkbox"),
    FormField("overlay_color", "Culoare overlay", "color"),
    FormField("overlay_opacity", "Opacitate overlay (%)", "number"),
    FormField("show_search_filter", "Formular de căutare", "checkbox"),
)
_register(
    "cards", "Carduri",
    {"title": "Titlu Secțiune Carduri", "cards": [{}]},
    FormField("title", "Titlu secțiune"),
    FormField("subtitle", "Subtitlu"),
    FormField("from_feed", "Carduri din pelerinaje", "checkbox"),
    FormField("cards", "Carduri", "list", item_fields=_CARD_FIELDS),
)
_register(
    "features", "Funcționalități",
    {"title": "Titlu Secțiune Funcționalități", "features": [{}]},
    FormField("title", "Titlu secțiune"),
    FormField("subtitle", "Subtitlu"),
    FormField("features", "Funcționalități", "list", item_fields=_FEATURE_FIELDS),
)
_register(
    "banners", "Bannere",
    {"title": "Bannere Promoționale", "subtitle": "Descoperiți ofertele speciale"},
    FormField("title", "Titlu secțiune"),
    FormField("subtitle", "Subtitlu"),
    FormField("display_type", "Mod afișare", "select", ("carousel", "grid")),
    FormField("banners", "Bannere", "list", item_fields=_BANNER_FIELDS),
)
_register(
    "cta", "Apel la acțiune",
    {
        "title": "Acționează Acum",
        "subtitle": "Nu rata această oportunitate unică",
        "button_text": "Află Mai Multe",
        "button_url": "/contact",
    },
    FormField("title", "Titlu"),
    FormField("subtitle", "Subtitlu", "textarea"),
    FormField("button_text", "Text buton"),
    FormField("button_url", "URL buton"),
    FormField("background_color", "Culoare fundal", "color"),
    FormField("text_color", "Culoare text", "color"),
)
_register(
    "pilgrimages", "Pelerinaje",
    {
        "title": "Pelerinaje disponibile",
        "subtitle": "Descoperă destinațiile spirituale și alege călătoria perfectă pentru tine",
    },
    FormField("title", "Titlu"),
    FormField("subtitle", "Subtitlu"),
    FormField("count", "Număr pelerinaje", "number"),
    FormField("show_promoted", "Doar promovate", "checkbox"),
    FormField("background_color", "Culoare fundal", "color"),
    FormField("text_color", "Culoare text", "color"),
)


# ── API publique ──────────────────────────────────────────────────────────────

def block_types() -> List[str]:
    return list(_SPECS)


def get_spec(block_type: str) -> BlockSpec:
    spec = _SPECS.get(block_type)
    if spec is None:
        raise UnknownBlockType(block_type)
    return spec


def default_content(block_type: str) -> ContentRecord:
    """Contenu initial d'un bloc neuf (nouvelle instance à chaque appel)."""
    spec = get_spec(block_type)
    return spec.content_cls.model_validate(spec.defaults)


def new_block(block_type: str, block_id: Optional[str] = None) -> BaseBlock:
    spec = get_spec(block_type)
    return spec.block_cls(id=block_id or "", content=default_content(block_type))


def edit_fields(block_type: str) -> Tuple[FormField, ...]:
    return get_spec(block_type).fields


def seed_form(block: BaseBlock) -> Dict[str, Any]:
    """
    Valeurs initiales du formulaire : contenu actuel, champs manquants complétés
    par leur défaut de repli. Bloc inconnu → pas de formulaire.
    """
    if isinstance(block, UnknownBlock) or block.type not in _SPECS:
        return {}
    return block.content.model_dump(mode="json")


def catalog() -> List[Dict[str, Any]]:
    """Catalogue des blocs : label, contenu par défaut, champs d'édition, JSON schema."""
    return [
        {
            "type":     spec.type,
            "label":    spec.label,
            "defaults": default_content(spec.type).model_dump(mode="json"),
            "fields":   [_field_json(f) for f in spec.fields],
            "schema":   spec.content_cls.model_json_schema(),
        }
        for spec in _SPECS.values()
    ]


def _field_json(f: FormField) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": f.name, "label": f.label, "kind": f.kind}
    if f.options:
        out["options"] = list(f.options)
    if f.item_fields:
        out["item_fields"] = [_field_json(i) for i in f.item_fields]
    return out
