"""
Builder à deux niveaux : BuilderPage → BuilderSection → BuilderComponent.

Même motif que PageSectionList un niveau plus bas : ids stables, listes
ordonnées, opérations totales (id introuvable → no-op).
"""
import copy
import json
import logging
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from . import ordering
from .blocks import new_block_id
from .exceptions import UnknownBlockType

log = logging.getLogger(__name__)

ComponentType = Literal["heading", "text", "image", "spacer", "button", "cmsContent"]
COMPONENT_TYPES = ("heading", "text", "image", "spacer", "button", "cmsContent")


class ComponentProperties(BaseModel):
    model_config = ConfigDict(extra="allow")

    class_name:       Optional[str]  = None
    css_id:           Optional[str]  = None
    is_html:          bool           = False
    image_class_name: Optional[str]  = None
    alt:              Optional[str]  = None
    height:           Optional[str]  = None
    variant:          str            = "default"    # default|destructive|outline|secondary|ghost|link
    size:             str            = "default"    # default|sm|lg|icon
    url:              Optional[str]  = None
    content_type:     Literal["text", "html", "image"] = "text"


class BuilderComponent(BaseModel):
    id:         str                 = ""
    type:       ComponentType       = Field(frozen=True)
    content:    str                 = ""
    cms_key:    Optional[str]       = None
    properties: ComponentProperties = Field(default_factory=ComponentProperties)

    @model_validator(mode="after")
    def _ensure_id(self):
        if not self.id:
            self.id = new_block_id(self.type)
        return self


class BuilderSection(BaseModel):
    id:         str                    = ""
    title:      str                    = "Secțiune nouă"
    css_class:  Optional[str]          = None
    css_id:     Optional[str]          = None
    styles:     Dict[str, Any]         = Field(default_factory=dict)
    components: List[BuilderComponent] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ensure_id(self):
        if not self.id:
            self.id = new_block_id("section")
        return self


# Contenu par défaut d'un composant neuf
_COMPONENT_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "heading":    {"content": "Titlu nou"},
    "text":       {"content": "Introduceți text aici..."},
    "image":      {"content": "", "properties": {"alt": ""}},
    "spacer":     {"properties": {"height": "2rem"}},
    "button":     {"content": "Buton", "properties": {"url": "/"}},
    "cmsContent": {"cms_key": "", "properties": {"content_type": "text"}},
}


def new_component(component_type: str) -> BuilderComponent:
    if component_type not in _COMPONENT_DEFAULTS:
        raise UnknownBlockType(component_type)
    return BuilderComponent(type=component_type, **copy.deepcopy(_COMPONENT_DEFAULTS[component_type]))


class BuilderPage(BaseModel):
    id:           Optional[str]        = None
    title:        str                  = ""
    slug:         str                  = ""
    page_type:    Optional[str]        = None
    is_published: bool                 = True
    sections:     List[BuilderSection] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self):
        """Ids de sections et de composants uniques sur la page : les doublons reçoivent un id neuf."""
        seen = set()
        for i, sec in enumerate(self.sections):
            if sec.id in seen:
                log.warning("id de section dupliqué %r : nouvel id attribué", sec.id)
                sec = self.sections[i] = sec.model_copy(update={"id": new_block_id("section")})
            seen.add(sec.id)
            for j, comp in enumerate(sec.components):
                if comp.id in seen:
                    log.warning("id de composant dupliqué %r : nouvel id attribué", comp.id)
                    comp = sec.components[j] = comp.model_copy(update={"id": new_block_id(comp.type)})
                seen.add(comp.id)
        return self

    # ── Sections ──────────────────────────────────────────────────────────────

    def section(self, section_id: str) -> Optional[BuilderSection]:
        return ordering.find(self.sections, section_id)

    def add_section(self, title: str = "Secțiune nouă", position: Optional[int] = None) -> BuilderSection:
        sec = BuilderSection(title=title)
        self.sections.insert(ordering.clamp(position, len(self.sections)), sec)
        return sec

    def remove_section(self, section_id: str) -> Optional[BuilderSection]:
        return ordering.remove(self.sections, section_id)

    def move_section_up(self, section_id: str) -> bool:
        return ordering.shift(self.sections, section_id, -1)

    def move_section_down(self, section_id: str) -> bool:
        return ordering.shift(self.sections, section_id, +1)

    def reorder_section(self, section_id: str, target_index: int) -> bool:
        return ordering.move_to(self.sections, section_id, target_index)

    def update_section(self, section_id: str, **attrs) -> Optional[BuilderSection]:
        """Réglages de section : title / css_class / css_id remplacés, styles fusionnés."""
        sec = self.section(section_id)
        if sec is None:
            return None
        styles = attrs.pop("styles", None)
        for key in ("title", "css_class", "css_id"):
            if key in attrs:
                setattr(sec, key, attrs[key])
        if styles:
            sec.styles = {**sec.styles, **dict(styles)}
        return sec

    def duplicate_section(self, section_id: str) -> Optional[BuilderSection]:
        i = ordering.index_of(self.sections, section_id)
        if i < 0:
            return None
        clone = self.sections[i].model_copy(deep=True, update={"id": new_block_id("section")})
        clone.components = [
            c.model_copy(update={"id": new_block_id(c.type)}) for c in clone.components
        ]
        self.sections.insert(i + 1, clone)
        return clone

    # ── Composants ────────────────────────────────────────────────────────────

    def add_component(self, section_id: str, component_type: str,
                      position: Optional[int] = None) -> Optional[BuilderComponent]:
        sec = self.section(section_id)
        if sec is None:
            return None
        comp = new_component(component_type)
        sec.components.insert(ordering.clamp(position, len(sec.components)), comp)
        return comp

    def remove_component(self, section_id: str, component_id: str) -> Optional[BuilderComponent]:
        sec = self.section(section_id)
        return ordering.remove(sec.components, component_id) if sec else None

    def move_component_up(self, section_id: str, component_id: str) -> bool:
        sec = self.section(section_id)
        return ordering.shift(sec.components, component_id, -1) if sec else False

    def move_component_down(self, section_id: str, component_id: str) -> bool:
        sec = self.section(section_id)
        return ordering.shift(sec.components, component_id, +1) if sec else False

    def reorder_component(self, section_id: str, component_id: str, target_index: int) -> bool:
        sec = self.section(section_id)
        return ordering.move_to(sec.components, component_id, target_index) if sec else False

    def update_component(self, section_id: str, component_id: str,
                         content: Optional[str] = None,
                         cms_key: Optional[str] = None,
                         properties: Optional[Mapping[str, Any]] = None) -> Optional[BuilderComponent]:
        """Remplace les parties fournies (content / cms_key / properties) ; pas de fusion des properties."""
        sec = self.section(section_id)
        if sec is None:
            return None
        i = ordering.index_of(sec.components, component_id)
        if i < 0:
            return None
        update: Dict[str, Any] = {}
        if content is not None:
            update["content"] = content
        if cms_key is not None:
            update["cms_key"] = cms_key
        if properties is not None:
            update["properties"] = ComponentProperties.model_validate(dict(properties))
        sec.components[i] = sec.components[i].model_copy(update=update)
        return sec.components[i]

    def duplicate_component(self, section_id: str, component_id: str) -> Optional[BuilderComponent]:
        sec = self.section(section_id)
        if sec is None:
            return None
        i = ordering.index_of(sec.components, component_id)
        if i < 0:
            return None
        source = sec.components[i]
        clone = source.model_copy(deep=True, update={"id": new_block_id(source.type)})
        sec.components.insert(i + 1, clone)
        return clone

    # ── Sérialisation ─────────────────────────────────────────────────────────

    def content_json(self) -> str:
        """Format stocké : chaîne JSON de la liste des sections."""
        return json.dumps([s.model_dump(mode="json") for s in self.sections], ensure_ascii=False)

    @classmethod
    def from_content(cls, content: str, **attrs) -> "BuilderPage":
        """Hydrate depuis la chaîne stockée ; lève ValueError si elle est illisible."""
        data = json.loads(content or "[]")
        if not isinstance(data, list):
            raise ValueError("Le contenu d'une page builder doit être une liste de sections")
        return cls(sections=data, **attrs)
