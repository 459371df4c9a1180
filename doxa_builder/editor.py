"""
SectionEditor : contrôleur de l'édition en place d'une page.

Deux modes : "view" (défaut, aucun contrôle) et "edit" (réservé aux rôles
autorisés, décision déléguée à `identity`). Basculer de mode n'a aucun effet
sur les données.

Chaque bloc ouvert en édition a son propre brouillon {committed, draft} :
Cancel jette le brouillon, Save appelle `update_content` avec le brouillon
et referme le formulaire. Les brouillons ne fuient jamais dans la liste avant
Save, et ne se contaminent pas entre blocs.

La persistance est une opération séparée, sur la liste entière. Son échec
remonte à l'appelant (PersistenceError) sans annuler l'édition en mémoire.
"""
import copy
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

from .blocks import Block, UnknownBlock
from .exceptions import PersistenceError
from .gateway import PageDocument, PersistenceGateway
from .gestures import DragSession
from .identity import ANONYMOUS, CurrentUser, can_edit
from .registry import seed_form
from .sections import PageSectionList

if TYPE_CHECKING:
    from .uploads import ImageUploader

log = logging.getLogger(__name__)

VIEW = "view"
EDIT = "edit"

# Champ recevant l'URL d'une image uploadée, par type de bloc
_IMAGE_FIELDS = {"image": "url", "hero": "background_image", "banners": "banners"}


class BlockDraft:
    """Copie de travail d'un bloc ouvert : `committed` = contenu au moment de l'ouverture."""

    def __init__(self, committed: Dict[str, Any]):
        self.committed = committed
        self.draft = copy.deepcopy(committed)

    @property
    def dirty(self) -> bool:
        return self.draft != self.committed


class SectionEditor:

    def __init__(
        self,
        sections: Optional[PageSectionList] = None,
        user: Optional[CurrentUser] = None,
        on_change: Optional[Callable[[PageSectionList], None]] = None,
        editor_roles: Optional[Iterable[str]] = None,
    ):
        self.sections = sections if sections is not None else PageSectionList()
        self.user = user or ANONYMOUS
        self.on_change = on_change
        self.editor_roles = tuple(editor_roles) if editor_roles is not None else None
        self.mode = VIEW
        self.dirty = False
        self.version: Optional[int] = None
        self.last_error: Optional[str] = None
        self._drafts: Dict[str, BlockDraft] = {}

    # ── Modes ─────────────────────────────────────────────────────────────────

    @property
    def can_edit(self) -> bool:
        return can_edit(self.user, self.editor_roles)

    @property
    def is_editing(self) -> bool:
        return self.mode == EDIT

    def enter_edit_mode(self) -> bool:
        if not self.can_edit:
            log.info("Mode édition refusé pour le rôle %r", self.user.role)
            return False
        self.mode = EDIT
        return True

    def exit_edit_mode(self):
        """Retour en lecture : les formulaires ouverts sont refermés sans sauvegarde."""
        self.mode = VIEW
        self._drafts.clear()

    def toggle_edit_mode(self) -> str:
        if self.is_editing:
            self.exit_edit_mode()
        else:
            self.enter_edit_mode()
        return self.mode

    # ── Opérations de liste ───────────────────────────────────────────────────

    def _guard(self, action: str) -> bool:
        if not self.is_editing:
            log.debug("%s ignoré : éditeur en mode lecture", action)
            return False
        return True

    def _changed(self, *_):
        self.dirty = True
        if self.on_change:
            self.on_change(self.sections)

    def add(self, block_type: str, position: Optional[int] = None) -> Optional[Block]:
        if not self._guard("add"):
            return None
        block = self.sections.insert(block_type, position)
        self._changed()
        return block

    def add_before(self, block_id: str, block_type: str) -> Optional[Block]:
        i = self.sections.index_of(block_id)
        return self.add(block_type, i if i >= 0 else None)

    def add_after(self, block_id: str, block_type: str) -> Optional[Block]:
        i = self.sections.index_of(block_id)
        return self.add(block_type, i + 1 if i >= 0 else None)

    def delete(self, block_id: str) -> Optional[Block]:
        if not self._guard("delete"):
            return None
        removed = self.sections.delete(block_id)
        self._drafts.pop(block_id, None)
        if removed is not None:
            self._changed()
        return removed

    def move_up(self, block_id: str) -> bool:
        if not self._guard("move_up") or self.sections.is_first(block_id):
            return False
        moved = self.sections.move_up(block_id)
        if moved:
            self._changed()
        return moved

    def move_down(self, block_id: str) -> bool:
        if not self._guard("move_down") or self.sections.is_last(block_id):
            return False
        moved = self.sections.move_down(block_id)
        if moved:
            self._changed()
        return moved

    def reorder(self, block_id: str, target_index: int) -> bool:
        if not self._guard("reorder"):
            return False
        moved = self.sections.reorder(block_id, target_index)
        if moved:
            self._changed()
        return moved

    def duplicate(self, block_id: str) -> Optional[Block]:
        if not self._guard("duplicate"):
            return None
        clone = self.sections.duplicate(block_id)
        if clone is not None:
            self._changed()
        return clone

    def update_styles(self, block_id: str, partial_styles: Mapping[str, Any]) -> Optional[Block]:
        if not self._guard("update_styles"):
            return None
        block = self.sections.update_styles(block_id, partial_styles)
        if block is not None:
            self._changed()
        return block

    def start_drag(self, block_id: str) -> Optional[DragSession]:
        if not self._guard("drag"):
            return None
        return DragSession(self.sections, block_id, on_move=self._changed)

    # ── Brouillons par bloc ───────────────────────────────────────────────────

    def is_open(self, block_id: str) -> bool:
        return block_id in self._drafts

    def open(self, block_id: str) -> Optional[Dict[str, Any]]:
        """Ouvre le formulaire : instantané du contenu courant dans un brouillon local."""
        if not self._guard("open"):
            return None
        block = self.sections.get(block_id)
        if block is None or isinstance(block, UnknownBlock):
            return None
        if block_id not in self._drafts:
            self._drafts[block_id] = BlockDraft(seed_form(block))
        return self._drafts[block_id].draft

    def draft(self, block_id: str) -> Optional[Dict[str, Any]]:
        d = self._drafts.get(block_id)
        return d.draft if d else None

    def edit(self, block_id: str, values: Optional[Mapping[str, Any]] = None, **fields) -> Optional[Dict[str, Any]]:
        """Modifie le brouillon (jamais la liste)."""
        d = self._drafts.get(block_id)
        if d is None:
            return None
        d.draft.update(dict(values or {}), **fields)
        return d.draft

    def add_item(self, block_id: str, list_field: str, item: Optional[Mapping[str, Any]] = None) -> Optional[List]:
        """Ajoute une entrée (carte, bannière, …) à un champ liste du brouillon."""
        d = self._drafts.get(block_id)
        if d is None or not isinstance(d.draft.get(list_field), list):
            return None
        d.draft[list_field] = d.draft[list_field] + [dict(item or {})]
        return d.draft[list_field]

    def edit_item(self, block_id: str, list_field: str, index: int, **values) -> Optional[List]:
        d = self._drafts.get(block_id)
        if d is None or not isinstance(d.draft.get(list_field), list):
            return None
        items = list(d.draft[list_field])
        if 0 <= index < len(items):
            items[index] = {**items[index], **values}
            d.draft[list_field] = items
        return d.draft[list_field]

    def remove_item(self, block_id: str, list_field: str, index: int) -> Optional[List]:
        d = self._drafts.get(block_id)
        if d is None or not isinstance(d.draft.get(list_field), list):
            return None
        items = list(d.draft[list_field])
        if 0 <= index < len(items):
            items.pop(index)
            d.draft[list_field] = items
        return d.draft[list_field]

    def save(self, block_id: str) -> Optional[Block]:
        """
        Valide le brouillon d'un seul bloc dans la liste en mémoire et referme le formulaire.
        Brouillon refusé par le type du bloc → formulaire laissé ouvert, liste inchangée.
        """
        d = self._drafts.get(block_id)
        if d is None:
            return None
        block = self.sections.update_content(block_id, d.draft)
        if block is None and self.sections.get(block_id) is not None:
            self.last_error = f"Contenu invalide pour le bloc {block_id}"
            return None
        del self._drafts[block_id]
        if block is None:
            return None
        self.last_error = None
        self._changed()
        return block

    def attach_image(self, block_id: str, uploader: "ImageUploader", filename: str, data: Any,
                     field: Optional[str] = None, index: Optional[int] = None) -> Optional[str]:
        """
        Envoie une image et place son URL dans le brouillon ouvert du bloc :
        `url` (image), `background_image` (hero), `banners[index].image` (bannere,
        nouvelle entrée si index absent). Un échec d'upload remonte (CollaboratorError).
        """
        d = self._drafts.get(block_id)
        block = self.sections.get(block_id)
        if d is None or block is None:
            return None
        field = field or _IMAGE_FIELDS.get(block.type)
        if field is None:
            return None
        url = uploader.upload(filename, data)
        if not isinstance(d.draft.get(field), list):
            d.draft[field] = url
        elif index is None:
            self.add_item(block_id, field, {"image": url})
        else:
            self.edit_item(block_id, field, index, image=url)
        return url

    def cancel(self, block_id: str) -> bool:
        return self._drafts.pop(block_id, None) is not None

    # ── Contrôles ─────────────────────────────────────────────────────────────

    def controls(self, block_id: str) -> List[str]:
        """Grappe de contrôles flottants d'un bloc, dans l'ordre d'affichage."""
        if not self.is_editing or self.sections.get(block_id) is None:
            return []
        out = ["add_before"]
        if not self.sections.is_first(block_id):
            out.append("move_up")
        if not self.sections.is_last(block_id):
            out.append("move_down")
        if self.is_open(block_id):
            out += ["save", "cancel"]
        elif not isinstance(self.sections.get(block_id), UnknownBlock):
            out.append("edit")
        out += ["duplicate", "delete", "add_after"]
        return out

    # ── Persistance ───────────────────────────────────────────────────────────

    def load(self, gateway: PersistenceGateway, page_id: str) -> PageDocument:
        doc = gateway.load(page_id)
        self.sections = doc.section_list()
        self.version = doc.version
        self.dirty = False
        self._drafts.clear()
        return doc

    def persist(self, gateway: PersistenceGateway, page_id: str, optimistic: bool = True) -> PageDocument:
        """
        Sauvegarde la liste entière. En cas d'échec : liste et drapeau `dirty`
        inchangés, l'erreur remonte (l'utilisateur peut réessayer).
        """
        expected = self.version if optimistic else None
        try:
            doc = gateway.save(page_id, self.sections, expected_version=expected)
        except PersistenceError as e:
            self.last_error = str(e)
            log.warning("Sauvegarde de la page %s échouée : %s", page_id, e)
            raise
        self.version = doc.version
        self.dirty = False
        self.last_error = None
        return doc
