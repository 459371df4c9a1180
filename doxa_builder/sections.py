"""
PageSectionList : liste ordonnée de blocs d'une page.

L'ordre est l'ordre de rendu. La liste n'est modifiée que par les opérations
ci-dessous, toutes totales : id introuvable → no-op (tolère les références
périmées d'un rendu précédent), jamais d'exception.
"""
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from . import ordering
from .blocks import BaseBlock, Block, UnknownBlock, new_block_id, parse_blocks
from .registry import get_spec, new_block

log = logging.getLogger(__name__)


class PageSectionList:

    def __init__(self, blocks: Optional[Iterable[Any]] = None):
        self._blocks: List[Block] = []
        for block in parse_blocks(blocks or []):
            self._append_unique(block)

    # ── Lecture ───────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, PageSectionList):
            return self.to_json() == other.to_json()
        return NotImplemented

    def __repr__(self) -> str:
        return f"PageSectionList({[f'{b.type}:{b.id}' for b in self._blocks]})"

    @property
    def blocks(self) -> List[Block]:
        return list(self._blocks)

    def ids(self) -> List[str]:
        return [b.id for b in self._blocks]

    def index_of(self, block_id: str) -> int:
        return ordering.index_of(self._blocks, block_id)

    def get(self, block_id: str) -> Optional[Block]:
        return ordering.find(self._blocks, block_id)

    def is_first(self, block_id: str) -> bool:
        return self.index_of(block_id) == 0

    def is_last(self, block_id: str) -> bool:
        i = self.index_of(block_id)
        return i >= 0 and i == len(self._blocks) - 1

    # ── Mutations ─────────────────────────────────────────────────────────────

    def insert(self, block: Union[str, BaseBlock], position: Optional[int] = None) -> Block:
        """
        Insère un bloc neuf à `position` (bornée), ou en fin de liste.
        `block` est un type (construit via le registry) ou un bloc déjà construit.
        """
        if isinstance(block, str):
            block = new_block(block)
        elif self.get(block.id) is not None:
            block = block.model_copy(update={"id": new_block_id(block.type)})
        index = ordering.clamp(position, len(self._blocks))
        self._blocks.insert(index, block)
        log.debug("insert %s à l'index %d", block.id, index)
        return block

    def delete(self, block_id: str) -> Optional[Block]:
        return ordering.remove(self._blocks, block_id)

    def move_up(self, block_id: str) -> bool:
        return ordering.shift(self._blocks, block_id, -1)

    def move_down(self, block_id: str) -> bool:
        return ordering.shift(self._blocks, block_id, +1)

    def move(self, block_id: str, direction: str) -> bool:
        if direction == "up":
            return self.move_up(block_id)
        if direction == "down":
            return self.move_down(block_id)
        return False

    def reorder(self, block_id: str, target_index: int) -> bool:
        return ordering.move_to(self._blocks, block_id, target_index)

    def duplicate(self, block_id: str) -> Optional[Block]:
        """Copie profonde (type, content, styles) avec un id neuf, insérée juste après la source."""
        i = self.index_of(block_id)
        if i < 0:
            return None
        source = self._blocks[i]
        clone = source.model_copy(deep=True, update={"id": new_block_id(source.type)})
        self._blocks.insert(i + 1, clone)
        return clone

    def update_content(self, block_id: str, new_content: Union[Mapping[str, Any], Any]) -> Optional[Block]:
        """
        Remplace le contenu en bloc (pas de fusion champ à champ). L'appelant
        fournit le contenu complet : ancien contenu + modifications.
        Contenu non conforme au type du bloc → no-op (None), la liste reste valide.
        """
        i = self.index_of(block_id)
        if i < 0:
            return None
        block = self._blocks[i]
        if isinstance(block, UnknownBlock):
            content = dict(new_content) if isinstance(new_content, Mapping) else new_content
        else:
            content_cls = get_spec(block.type).content_cls
            if isinstance(new_content, content_cls):
                new_content = new_content.model_dump()
            try:
                content = content_cls.model_validate(dict(new_content))
            except (ValidationError, TypeError, ValueError) as e:
                log.warning("Contenu refusé pour le bloc %s, liste inchangée : %s", block_id, e)
                return None
        updated = block.model_copy(update={"content": content})
        self._blocks[i] = updated
        return updated

    def update_styles(self, block_id: str, partial_styles: Mapping[str, Any]) -> Optional[Block]:
        """Fusion superficielle sur les styles existants (édition incrémentale)."""
        i = self.index_of(block_id)
        if i < 0:
            return None
        block = self._blocks[i]
        updated = block.model_copy(update={"styles": {**block.styles, **dict(partial_styles)}})
        self._blocks[i] = updated
        return updated

    # ── Sérialisation ─────────────────────────────────────────────────────────

    def to_json(self) -> List[Dict[str, Any]]:
        return [b.to_json() for b in self._blocks]

    @classmethod
    def from_json(cls, data: Optional[Iterable[Any]]) -> "PageSectionList":
        return cls(data or [])

    def copy(self) -> "PageSectionList":
        return PageSectionList(self.to_json())

    def _append_unique(self, block: Block):
        if self.get(block.id) is not None:
            log.warning("id de bloc dupliqué %r à l'hydratation : nouvel id attribué", block.id)
            block = block.model_copy(update={"id": new_block_id(block.type)})
        self._blocks.append(block)
