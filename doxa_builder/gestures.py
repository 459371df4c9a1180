"""
Adaptateur de geste drag & drop → deltas d'index.

La logique de liste reste indépendante de la plateforme : la couche UI ne
transmet que des événements de survol (bloc survolé, bornes verticales,
position du pointeur). Chaque franchissement du milieu du bloc survolé
décale le bloc glissé d'exactement une position, jamais plus.
"""
import logging
from typing import Callable, Optional

from .sections import PageSectionList

log = logging.getLogger(__name__)


class DragSession:

    def __init__(self, sections: PageSectionList, block_id: str,
                 on_move: Optional[Callable[[str, str], None]] = None):
        self.sections = sections
        self.block_id = block_id
        self.on_move = on_move
        self.active = sections.index_of(block_id) >= 0

    @property
    def index(self) -> int:
        return self.sections.index_of(self.block_id)

    def hover(self, hover_id: str, top: float, bottom: float, pointer_y: float) -> Optional[str]:
        """
        Le pointeur survole `hover_id`, dont la boîte va de `top` à `bottom`.
        Retourne "up", "down" ou None selon le décalage appliqué.
        """
        if not self.active:
            return None
        drag_index = self.index
        hover_index = self.sections.index_of(hover_id)
        if drag_index < 0 or hover_index < 0 or drag_index == hover_index:
            return None

        middle = (bottom - top) / 2
        offset = pointer_y - top

        direction = None
        if drag_index > hover_index and offset < middle and self.sections.move_up(self.block_id):
            direction = "up"
        elif drag_index < hover_index and offset > middle and self.sections.move_down(self.block_id):
            direction = "down"

        if direction and self.on_move:
            self.on_move(self.block_id, direction)
        return direction

    def drop(self) -> int:
        """Fin du geste ; retourne l'index final du bloc (-1 si disparu)."""
        self.active = False
        final = self.index
        log.debug("drop %s à l'index %d", self.block_id, final)
        return final
