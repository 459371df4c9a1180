"""
Formulaires d'édition et grappe de contrôles (mode édition).

Les champs viennent du registry ; les valeurs du brouillon du bloc, jamais
de la liste. Les noms d'inputs suivent le chemin du champ : `cards[0].title`.
"""
from typing import Any, Dict, Iterable, List, Mapping

from ..registry import FormField, edit_fields, get_spec
from .html import _e

CONTROL_LABELS = {
    "add_before": ("↑+", "Adaugă secțiune deasupra"),
    "move_up":    ("↑",  "Mută în sus"),
    "move_down":  ("↓",  "Mută în jos"),
    "save":       ("✓",  "Salvează"),
    "cancel":     ("✕",  "Anulează"),
    "edit":       ("✎",  "Editează"),
    "duplicate":  ("⧉",  "Duplică"),
    "delete":     ("🗑", "Șterge"),
    "add_after":  ("↓+", "Adaugă secțiune dedesubt"),
}


def render_field(field: FormField, value: Any, prefix: str = "") -> str:
    name = f"{prefix}{field.name}"
    label = f'<label for="{_e(name)}">{_e(field.label)}</label>'

    if field.kind == "textarea":
        control = f'<textarea id="{_e(name)}" name="{_e(name)}" rows="4">{_e(value)}</textarea>'
    elif field.kind == "select":
        opts = "".join(
            f'<option value="{_e(o)}"{" selected" if o == value else ""}>{_e(o)}</option>'
            for o in field.options
        )
        control = f'<select id="{_e(name)}" name="{_e(name)}">{opts}</select>'
    elif field.kind == "checkbox":
        control = f'<input type="checkbox" id="{_e(name)}" name="{_e(name)}"{" checked" if value else ""}>'
    elif field.kind == "list":
        return render_list_field(field, value or [], prefix)
    else:
        kind = field.kind if field.kind in ("number", "color") else "text"
        control = f'<input type="{kind}" id="{_e(name)}" name="{_e(name)}" value="{_e(value)}">'

    return f'<div class="doxa-field doxa-field--{field.kind}">{label}{control}</div>'


def render_list_field(field: FormField, items: Iterable[Mapping[str, Any]], prefix: str = "") -> str:
    rows = []
    for i, item in enumerate(items):
        inner = "".join(
            render_field(sub, (item or {}).get(sub.name, ""), f"{prefix}{field.name}[{i}].")
            for sub in field.item_fields
        )
        rows.append(
            f'<fieldset class="doxa-list__item" data-index="{i}">{inner}'
            f'<button type="button" data-action="remove_item" data-field="{_e(field.name)}" data-index="{i}">Elimină</button>'
            f'</fieldset>'
        )
    return (f'<div class="doxa-field doxa-field--list"><span class="doxa-field__label">{_e(field.label)}</span>'
            f'{"".join(rows)}'
            f'<button type="button" data-action="add_item" data-field="{_e(field.name)}">Adaugă</button></div>')


def render_form(block_id: str, block_type: str, values: Mapping[str, Any]) -> str:
    """Formulaire d'un bloc ouvert, pré-rempli avec le brouillon."""
    spec = get_spec(block_type)
    body = "\n  ".join(render_field(f, values.get(f.name, "")) for f in edit_fields(block_type))
    return f"""<form class="doxa-form doxa-form--{block_type}" data-block-id="{_e(block_id)}">
  <h4 class="doxa-form__title">{_e(spec.label)}</h4>
  {body}
</form>"""


def render_controls(block_id: str, actions: List[str]) -> str:
    if not actions:
        return ""
    buttons = "".join(
        f'<button type="button" class="doxa-control doxa-control--{a}" data-action="{a}" '
        f'data-block-id="{_e(block_id)}" title="{_e(CONTROL_LABELS[a][1])}">{CONTROL_LABELS[a][0]}</button>'
        for a in actions
    )
    return f'<div class="doxa-controls">{buttons}</div>'


def form_values(block_type: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Reconstruit le contenu depuis des champs plats `cards[0].title` (soumission HTML).
    Les checkboxes absentes valent False.
    """
    out: Dict[str, Any] = {}
    for field in edit_fields(block_type):
        if field.kind == "checkbox":
            out[field.name] = str(data.get(field.name, "")).lower() in ("on", "true", "1")
        elif field.kind == "list":
            items: Dict[int, Dict[str, Any]] = {}
            head = f"{field.name}["
            for key, value in data.items():
                if not key.startswith(head) or "]." not in key:
                    continue
                idx, sub = key[len(head):].split("].", 1)
                if idx.isdigit():
                    items.setdefault(int(idx), {})[sub] = value
            out[field.name] = [items[i] for i in sorted(items)]
        elif field.name in data:
            out[field.name] = data[field.name]
    return out
