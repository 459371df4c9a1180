"""
Flux des pèlerinages : lecture seule, consommé par les blocs `pilgrimages` et `cards`.
Contrat : list(filters) → [Pilgrimage], mis en avant (featured) d'abord.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

import requests as http
from pydantic import BaseModel, ConfigDict, Field

from . import config
from .exceptions import CollaboratorError

log = logging.getLogger(__name__)


class Pilgrimage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id:              int
    title:           str
    description:     str                = ""
    location:        str                = ""
    month:           Optional[str]      = None
    saint:           Optional[str]      = None
    transportation:  Optional[str]      = None
    guide:           Optional[str]      = None
    start_date:      Optional[datetime] = Field(None, alias="startDate")
    end_date:        Optional[datetime] = Field(None, alias="endDate")
    price:           float              = 0.0
    currency:        str                = "RON"
    images:          List[str]          = Field(default_factory=list)
    available_spots: int                = Field(0, alias="availableSpots")
    featured:        bool               = False
    promoted:        bool               = False
    verified:        bool               = False

    @property
    def cover(self) -> str:
        return self.images[0] if self.images else ""


class PilgrimageFilters(BaseModel):
    location:       Optional[str]  = None
    month:          Optional[str]  = None
    saint:          Optional[str]  = None
    transportation: Optional[str]  = None
    guide:          Optional[str]  = None
    featured:       Optional[bool] = None
    promoted:       Optional[bool] = None

    def params(self) -> dict:
        out = {}
        for k, v in self.model_dump(exclude_none=True).items():
            out[k] = ("true" if v else "false") if isinstance(v, bool) else v
        return out


def featured_first(items: Iterable[Pilgrimage]) -> List[Pilgrimage]:
    items = list(items)
    return [p for p in items if p.featured] + [p for p in items if not p.featured]


class PilgrimageFeed(ABC):

    @abstractmethod
    def list(self, filters: Optional[PilgrimageFilters] = None) -> List[Pilgrimage]: ...


class StaticFeed(PilgrimageFeed):
    """Flux en mémoire (tests, prévisualisation hors ligne)."""

    def __init__(self, pilgrimages: Iterable[Pilgrimage] = ()):
        self.pilgrimages = [
            p if isinstance(p, Pilgrimage) else Pilgrimage.model_validate(p) for p in pilgrimages
        ]

    def list(self, filters: Optional[PilgrimageFilters] = None) -> List[Pilgrimage]:
        f = filters or PilgrimageFilters()
        out = []
        for p in self.pilgrimages:
            if any(
                want is not None and (getattr(p, name) or "").lower() != want.lower()
                for name, want in (
                    ("location", f.location), ("month", f.month), ("saint", f.saint),
                    ("transportation", f.transportation), ("guide", f.guide),
                )
            ):
                continue
            if f.featured is not None and p.featured != f.featured:
                continue
            if f.promoted is not None and p.promoted != f.promoted:
                continue
            out.append(p)
        return featured_first(out)


class HttpPilgrimageFeed(PilgrimageFeed):
    """GET {base}/api/pilgrimages (ou /api/pilgrimages/promoted)."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[http.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.session = session or http.Session()
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    def list(self, filters: Optional[PilgrimageFilters] = None) -> List[Pilgrimage]:
        f = filters or PilgrimageFilters()
        params = f.params()
        path = "/api/pilgrimages"
        if params.pop("promoted", None) == "true":
            path = "/api/pilgrimages/promoted"
        try:
            r = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
            r.raise_for_status()
        except http.RequestException as e:
            raise CollaboratorError(f"Flux pèlerinages indisponible : {e}") from e
        items = [Pilgrimage.model_validate(p) for p in r.json()]
        log.debug("%d pèlerinages reçus (%s)", len(items), path)
        return featured_first(items)
