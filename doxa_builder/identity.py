"""
Utilisateur courant : seul le rôle est lu, pour décider d'afficher ou non
les contrôles d'édition. Aucune vérification côté serveur ici : les endpoints
d'écriture du backend rejettent eux-mêmes les écritures non autorisées.
"""
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel

from . import config


class CurrentUser(BaseModel):
    id:       Optional[int] = None
    username: str           = ""
    role:     str           = "user"


ANONYMOUS = CurrentUser(role="anonymous")


def can_edit(user: Optional[CurrentUser], roles: Optional[Iterable[str]] = None) -> bool:
    allowed = tuple(roles) if roles is not None else config.EDITOR_ROLES
    return bool(user) and user.role in allowed


def user_from_headers(headers: Mapping[str, str]) -> CurrentUser:
    """Identité transmise par la couche d'authentification en amont (en-têtes de confiance)."""
    role = headers.get("x-doxa-role") or headers.get("X-Doxa-Role")
    if not role:
        return ANONYMOUS
    uid = headers.get("x-doxa-user-id") or headers.get("X-Doxa-User-Id")
    return CurrentUser(
        id=int(uid) if uid and uid.isdigit() else None,
        username=headers.get("x-doxa-user") or headers.get("X-Doxa-User") or "",
        role=role,
    )
