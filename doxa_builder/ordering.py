"""
Primitives de liste ordonnée indexée par `id`.

Partagées par PageSectionList et le builder à deux niveaux. Toutes totales :
id introuvable → no-op, jamais d'exception.
"""
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def index_of(items: Sequence[T], item_id: str) -> int:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return -1


def find(items: Sequence[T], item_id: str) -> Optional[T]:
    i = index_of(items, item_id)
    return items[i] if i >= 0 else None


def clamp(position: Optional[int], length: int) -> int:
    """Position d'insertion dans [0, length] ; None → fin de liste."""
    if position is None:
        return length
    return max(0, min(int(position), length))


def remove(items: List[T], item_id: str) -> Optional[T]:
    i = index_of(items, item_id)
    return items.pop(i) if i >= 0 else None


def shift(items: List[T], item_id: str, delta: int) -> bool:
    """Échange avec le voisin immédiat (delta = -1 / +1). Bords → no-op, pas de bouclage."""
    i = index_of(items, item_id)
    j = i + delta
    if i < 0 or j < 0 or j >= len(items):
        return False
    items[i], items[j] = items[j], items[i]
    return True


def move_to(items: List[T], item_id: str, target: int) -> bool:
    """Déplace un élément à l'index `target` (borné). Retourne True si l'ordre a changé."""
    i = index_of(items, item_id)
    if i < 0:
        return False
    target = max(0, min(int(target), len(items) - 1))
    if target == i:
        return False
    items.insert(target, items.pop(i))
    return True
