"""
Rendu du modèle builder (BuilderPage → sections → composants).
Les composants `cmsContent` résolvent leur clé via le client CMS.
"""
import logging
from typing import Optional

from ..builder import BuilderComponent, BuilderPage, BuilderSection
from ..cms import CmsClient
from ..exceptions import CollaboratorError
from .html import _e, render_attrs, style_attr

log = logging.getLogger(__name__)

EMPTY_PAGE = "Nu există conținut pentru această pagină"
LOAD_ERROR = "Eroare la încărcarea conținutului paginii"


def _cms_value(cms: Optional[CmsClient], key: Optional[str]):
    if not cms or not key:
        return None
    try:
        return cms.get(key)
    except CollaboratorError as e:
        log.warning("CMS indisponible pour %s : %s", key, e)
        return None


def render_component(comp: BuilderComponent, cms: Optional[CmsClient] = None) -> str:
    p = comp.properties
    attrs = render_attrs({"id": p.css_id, "class": p.class_name})

    if comp.type == "heading":
        return f"<h2{attrs}>{_e(comp.content)}</h2>"
    if comp.type == "text":
        body = comp.content if p.is_html else _e(comp.content)
        return f"<div{attrs}>{body}</div>"
    if comp.type == "image":
        if not comp.content:
            return ""
        img_cls = render_attrs({"class": p.image_class_name})
        return f'<div{attrs}><img src="{_e(comp.content)}" alt="{_e(p.alt or "")}"{img_cls}></div>'
    if comp.type == "spacer":
        return f'<div{attrs} style="height:{_e(p.height or "2rem")}"></div>'
    if comp.type == "button":
        return (f'<a href="{_e(p.url or "#")}" class="doxa-btn doxa-btn--{p.variant} doxa-btn--{p.size}'
                f'{" " + _e(p.class_name) if p.class_name else ""}"'
                f'{render_attrs({"id": p.css_id})}>{_e(comp.content)}</a>')

    # cmsContent
    entry = _cms_value(cms, comp.cms_key)
    value = entry.value if entry else ""
    if p.content_type == "image":
        return f'<div{attrs}><img src="{_e(value)}" alt="{_e(p.alt or "")}"></div>' if value else ""
    if p.content_type == "html":
        return f"<div{attrs}>{value}</div>"
    return f"<div{attrs}>{_e(value)}</div>"


def render_builder_section(section: BuilderSection, cms: Optional[CmsClient] = None) -> str:
    attrs = render_attrs({"id": section.css_id, "class": " ".join(filter(None, ["doxa-builder-section", section.css_class]))})
    inner = "\n  ".join(render_component(c, cms) for c in section.components)
    return f"<section{attrs}{style_attr(styles=section.styles)}>\n  {inner}\n</section>"


def render_builder_page(page: BuilderPage, cms: Optional[CmsClient] = None) -> str:
    if not page.sections:
        return f'<div class="doxa-builder-empty">{EMPTY_PAGE}</div>'
    return "\n".join(render_builder_section(s, cms) for s in page.sections)


def render_builder_content(content: str, cms: Optional[CmsClient] = None, **attrs) -> str:
    """Rendu depuis la chaîne JSON stockée ; contenu illisible → message d'erreur."""
    try:
        page = BuilderPage.from_content(content, **attrs)
    except ValueError as e:
        log.warning("Contenu de page builder illisible : %s", e)
        return f'<div class="doxa-builder-error" role="alert">{LOAD_ERROR}</div>'
    return render_builder_page(page, cms)
