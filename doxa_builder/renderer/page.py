"""
Rendu d'une liste de sections : mode lecture, ou mode édition avec contrôles
et formulaires ouverts.
"""
from typing import TYPE_CHECKING, Optional

from ..feed import PilgrimageFeed
from ..sections import PageSectionList
from .forms import render_controls, render_form
from .html import _e, block_class_name, render_attrs, render_block

if TYPE_CHECKING:
    from ..editor import SectionEditor

_CSS = """
.doxa-section{position:relative}
.doxa-section--editing{outline:1px dashed #94a3b8}
.doxa-controls{position:absolute;top:.5rem;right:.5rem;display:flex;gap:.25rem;z-index:10}
.doxa-block--unknown{padding:1rem;background:#fef2f2;color:#b91c1c}
.doxa-cards__grid,.doxa-features__grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(16rem,1fr));gap:1.5rem}
.doxa-hero{position:relative;display:flex;align-items:center;justify-content:center;background-size:cover;background-position:center}
.doxa-hero__overlay{position:absolute;inset:0}
.doxa-hero__content{position:relative;text-align:center}
"""


def render_sections(
    sections: PageSectionList,
    editor: Optional["SectionEditor"] = None,
    feed: Optional[PilgrimageFeed] = None,
) -> str:
    """Toutes les sections dans l'ordre de la liste."""
    editing = editor is not None and editor.is_editing
    parts = []
    for block in sections:
        open_ = editing and editor.is_open(block.id)
        body = render_form(block.id, block.type, editor.draft(block.id)) if open_ else render_block(block, feed)
        classes = ["doxa-section", block_class_name(block)]
        if editing:
            classes.append("doxa-section--editing")
        attrs = render_attrs({
            "class": " ".join(classes),
            "data-block-id": block.id,
            "draggable": "true" if editing else None,
        })
        controls = render_controls(block.id, editor.controls(block.id)) if editing else ""
        parts.append(f"<div{attrs}>{controls}\n{body}\n</div>")

    if not parts and editing:
        return ('<div class="doxa-empty"><button type="button" data-action="add" class="doxa-control">'
                'Adaugă prima secțiune</button></div>')
    return "\n".join(parts)


def render_page(
    sections: PageSectionList,
    title: str = "",
    editor: Optional["SectionEditor"] = None,
    feed: Optional[PilgrimageFeed] = None,
    extra_head: str = "",
) -> str:
    """Document HTML complet."""
    return f"""<!DOCTYPE html>
<html lang="ro">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{_e(title)}</title>
  <style>{_CSS}</style>
  {extra_head}
</head>
<body>
{render_sections(sections, editor, feed)}
</body>
</html>"""
