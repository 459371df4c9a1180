"""
Client du store CMS clé/valeur.

Entrées plates {key, content_type: text|html|image, value, description},
adressées par clé (convention de nommage : `footer_contact_email`,
`homepage_banner_1`, …).

Cache de lecture par vue ("list", "key:<clé>", "banners"). Chaque écriture
déclare exactement les vues qu'elle invalide (voir `views_invalidated_by`)
au lieu de vider tout le cache.
"""
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Literal, Optional, Set

import requests as http
from pydantic import BaseModel

from . import config
from .exceptions import CollaboratorError

log = logging.getLogger(__name__)

BANNER_KEY = re.compile(r"^homepage_banner_(\d+)$")


class CmsEntry(BaseModel):
    key:          str
    content_type: Literal["text", "html", "image"] = "text"
    value:        str = ""
    description:  Optional[str] = None


def is_banner_key(key: str) -> bool:
    return bool(BANNER_KEY.match(key or ""))


def views_invalidated_by(operation: str, keys: Iterable[str]) -> Set[str]:
    """Vues de lecture rendues obsolètes par une écriture CMS."""
    keys = list(keys)
    views: Set[str] = set()
    if operation in ("create", "update", "delete", "initialize"):
        views.add("list")
        views.update(f"key:{k}" for k in keys)
        if any(is_banner_key(k) for k in keys):
            views.add("banners")
    return views


class CmsClient:

    def __init__(self, base_url: Optional[str] = None, session: Optional[http.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.session = session or http.Session()
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self._cache: Dict[str, Any] = {}

    # ── Cache ─────────────────────────────────────────────────────────────────

    def _cached(self, view: str, fetch: Callable[[], Any]) -> Any:
        if view not in self._cache:
            self._cache[view] = fetch()
        return self._cache[view]

    def invalidate(self, views: Iterable[str]):
        for view in views:
            self._cache.pop(view, None)

    def cached_views(self) -> Set[str]:
        return set(self._cache)

    # ── HTTP ──────────────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except http.RequestException as e:
            raise CollaboratorError(f"CMS {method} {path} : {e}") from e
        if r.status_code >= 400 and r.status_code != 404:
            raise CollaboratorError(f"CMS {method} {path} : HTTP {r.status_code}")
        return r

    # ── Lecture ───────────────────────────────────────────────────────────────

    def list(self) -> List[CmsEntry]:
        def fetch():
            r = self._request("GET", "/api/cms")
            return [CmsEntry.model_validate(e) for e in (r.json() if r.status_code == 200 else [])]
        return self._cached("list", fetch)

    def get(self, key: str) -> Optional[CmsEntry]:
        def fetch():
            r = self._request("GET", f"/api/cms/{key}")
            return CmsEntry.model_validate(r.json()) if r.status_code == 200 else None
        return self._cached(f"key:{key}", fetch)

    def banners(self) -> List[CmsEntry]:
        """Entrées `homepage_banner_<n>` de type image, triées par n."""
        def fetch():
            found = [e for e in self.list() if is_banner_key(e.key) and e.content_type == "image"]
            return sorted(found, key=lambda e: int(BANNER_KEY.match(e.key).group(1)))
        return self._cached("banners", fetch)

    def text(self, key: str, fallback: str = "") -> str:
        """Substitution de texte : clé absente ou CMS injoignable → fallback."""
        try:
            entry = self.get(key)
        except CollaboratorError as e:
            log.warning("CMS indisponible pour %s : %s", key, e)
            return fallback
        return entry.value if entry and entry.value else fallback

    # ── Écriture ──────────────────────────────────────────────────────────────

    def create(self, entry: CmsEntry) -> CmsEntry:
        r = self._request("POST", "/api/cms", json=entry.model_dump())
        if r.status_code == 404:
            raise CollaboratorError("CMS POST /api/cms : HTTP 404")
        self.invalidate(views_invalidated_by("create", [entry.key]))
        return CmsEntry.model_validate(r.json() if r.content else entry.model_dump())

    def update(self, key: str, **fields) -> Optional[CmsEntry]:
        r = self._request("PUT", f"/api/cms/{key}", json=fields)
        if r.status_code == 404:
            return None
        self.invalidate(views_invalidated_by("update", [key]))
        return CmsEntry.model_validate(r.json() if r.content else {"key": key, **fields})

    def delete(self, key: str) -> bool:
        r = self._request("DELETE", f"/api/cms/{key}")
        if r.status_code == 404:
            return False
        self.invalidate(views_invalidated_by("delete", [key]))
        return True

    def initialize(self, entries: Iterable[CmsEntry]) -> Dict[str, Any]:
        """Upsert par lot ; retourne les stats du backend (created / errors / …)."""
        entries = list(entries)
        r = self._request("POST", "/api/cms/initialize", json=[e.model_dump() for e in entries])
        self.invalidate(views_invalidated_by("initialize", [e.key for e in entries]))
        body = r.json() if r.content else {}
        log.info("CMS initialisé : %s", body.get("stats"))
        return body
