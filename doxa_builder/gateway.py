"""
Persistence Gateway : chargement / sauvegarde d'une page entière.

Contrat :
  load(page_id)                         → PageDocument (page neuve → sections vides, version 0)
  save(page_id, sections, expected_version=None) → PageDocument

`save` remplace le document entier (pas de diff). Concurrence : jeton de
version optimiste. `expected_version=None` = dernier écrivain gagnant,
choisi explicitement par l'appelant ; sinon un écart lève VersionConflict.
"""
import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Union

import requests as http
from pydantic import BaseModel, Field

from . import config
from .exceptions import PersistenceError, VersionConflict
from .sections import PageSectionList

log = logging.getLogger(__name__)

SectionsLike = Union[PageSectionList, Iterable[Dict[str, Any]]]


class PageDocument(BaseModel):
    id:       str
    title:    str                  = ""
    slug:     str                  = ""
    version:  int                  = 0
    sections: List[Dict[str, Any]] = Field(default_factory=list)

    def section_list(self) -> PageSectionList:
        return PageSectionList.from_json(self.sections)


def _sections_json(sections: SectionsLike) -> List[Dict[str, Any]]:
    if isinstance(sections, PageSectionList):
        return sections.to_json()
    return PageSectionList.from_json(list(sections)).to_json()


class PersistenceGateway(ABC):

    @abstractmethod
    def load(self, page_id: str) -> PageDocument: ...

    @abstractmethod
    def save(
        self,
        page_id: str,
        sections: SectionsLike,
        expected_version: Optional[int] = None,
        title: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> PageDocument: ...


# ── Mémoire (dev + tests) ─────────────────────────────────────────────────────

class InMemoryGateway(PersistenceGateway):
    """Stocke des copies JSON profondes : aucun aliasing avec l'éditeur."""

    def __init__(self, pages: Optional[Dict[str, PageDocument]] = None):
        self._pages: Dict[str, PageDocument] = dict(pages or {})

    def load(self, page_id: str) -> PageDocument:
        doc = self._pages.get(page_id)
        if doc is None:
            return PageDocument(id=page_id)
        return doc.model_copy(deep=True)

    def save(self, page_id, sections, expected_version=None, title=None, slug=None) -> PageDocument:
        current = self._pages.get(page_id) or PageDocument(id=page_id)
        if expected_version is not None and expected_version != current.version:
            raise VersionConflict(page_id, expected_version, current.version)
        doc = PageDocument(
            id=page_id,
            title=title if title is not None else current.title,
            slug=slug if slug is not None else current.slug,
            version=current.version + 1,
            sections=copy.deepcopy(_sections_json(sections)),
        )
        self._pages[page_id] = doc
        log.info("Page %s sauvegardée (v%d, %d sections)", page_id, doc.version, len(doc.sections))
        return doc.model_copy(deep=True)


# ── HTTP (backend REST) ───────────────────────────────────────────────────────

class HttpGateway(PersistenceGateway):
    """
    Client du backend :
      GET {base}/api/pages/{id}  → document (404 → page neuve)
      PUT {base}/api/pages/{id}  ← {"sections": [...], "version": n}
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[http.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.session = session or http.Session()
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    def _url(self, page_id: str) -> str:
        return f"{self.base_url}/api/pages/{page_id}"

    def load(self, page_id: str) -> PageDocument:
        try:
            r = self.session.get(self._url(page_id), timeout=self.timeout)
        except http.RequestException as e:
            raise PersistenceError(f"Chargement de la page {page_id} impossible : {e}") from e
        if r.status_code == 404:
            return PageDocument(id=page_id)
        if r.status_code >= 400:
            raise PersistenceError(f"Chargement de la page {page_id} : HTTP {r.status_code}")
        return _document_from_payload(page_id, r.json())

    def save(self, page_id, sections, expected_version=None, title=None, slug=None) -> PageDocument:
        payload: Dict[str, Any] = {"sections": _sections_json(sections), "version": expected_version}
        if title is not None:
            payload["title"] = title
        if slug is not None:
            payload["slug"] = slug
        try:
            r = self.session.put(self._url(page_id), json=payload, timeout=self.timeout)
        except http.RequestException as e:
            raise PersistenceError(f"Sauvegarde de la page {page_id} impossible : {e}") from e
        if r.status_code == 409:
            actual = _safe_json(r).get("version", -1)
            raise VersionConflict(page_id, expected_version, actual)
        if r.status_code >= 400:
            raise PersistenceError(f"Sauvegarde de la page {page_id} : HTTP {r.status_code}")
        body = _safe_json(r)
        if not body:
            # Backend muet : on considère le document envoyé comme la version stockée
            body = {**payload, "version": (expected_version or 0) + 1}
        return _document_from_payload(page_id, body)


def _safe_json(r) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _document_from_payload(page_id: str, data: Dict[str, Any]) -> PageDocument:
    """Accepte `sections` direct ou l'ancien format `content` = chaîne JSON {"sections": [...]}."""
    sections = data.get("sections")
    if sections is None and data.get("content"):
        try:
            content = json.loads(data["content"]) if isinstance(data["content"], str) else data["content"]
        except ValueError:
            log.warning("Contenu illisible pour la page %s : liste vide", page_id)
            content = {}
        sections = content.get("sections", []) if isinstance(content, dict) else content
    return PageDocument(
        id=str(data.get("id") or page_id),
        title=data.get("title") or "",
        slug=data.get("slug") or "",
        version=int(data.get("version") or 0),
        sections=list(sections or []),
    )
