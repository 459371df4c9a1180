"""
Router FastAPI : endpoints du page builder.

GET  /page-builder/catalog              → blocs disponibles (défauts, champs, JSON schemas)
POST /page-builder/render               → sections → HTMLResponse (?edit=1 pour les éditeurs)
POST /page-builder/validate             → sections → {"valid", "unknown", "invalid"}
POST /page-builder/apply                → une opération de liste → {"sections", "result"}
GET  /page-builder/pages/{page_id}      → PageDocument
PUT  /page-builder/pages/{page_id}      → sauvegarde de la liste entière (version optimiste)
GET  /page-builder/pages/{page_id}/html → page rendue
POST /page-builder/builder/render       → contenu builder (chaîne JSON) → HTMLResponse
POST /page-builder/uploads/image        → fichier image → {"url"} (éditeurs)
"""
import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from . import config
from .blocks import InvalidBlock, UnknownBlock
from .cms import CmsClient
from .editor import SectionEditor
from .exceptions import (
    CollaboratorError,
    InvalidUpload,
    PersistenceError,
    UnknownBlockType,
    VersionConflict,
)
from .feed import HttpPilgrimageFeed, PilgrimageFeed
from .gateway import HttpGateway, InMemoryGateway, PageDocument, PersistenceGateway
from .identity import CurrentUser, can_edit, user_from_headers
from .registry import catalog as block_catalog
from .renderer import render_builder_content, render_page
from .sections import PageSectionList
from .uploads import ImageUploader

log = logging.getLogger(__name__)

router = APIRouter(prefix="/page-builder", tags=["page_builder"])


# ── Collaborateurs (surchargeables via app.dependency_overrides) ────────────

_gateway: Optional[PersistenceGateway] = None


def get_gateway() -> PersistenceGateway:
    global _gateway
    if _gateway is None:
        _gateway = HttpGateway() if config.GATEWAY == "http" else InMemoryGateway()
        log.info("Gateway de persistance : %s", type(_gateway).__name__)
    return _gateway


def get_feed() -> Optional[PilgrimageFeed]:
    return HttpPilgrimageFeed() if config.GATEWAY == "http" else None


def get_cms() -> Optional[CmsClient]:
    return CmsClient() if config.GATEWAY == "http" else None


def get_uploader() -> ImageUploader:
    return ImageUploader()


def get_user(request: Request) -> CurrentUser:
    return user_from_headers(request.headers)


def require_editor(user: CurrentUser = Depends(get_user)) -> CurrentUser:
    if not can_edit(user):
        raise HTTPException(403, "Modification réservée aux administrateurs")
    return user


# ── Corps de requête ────────────────────────────────────────────────────────

class SectionsPayload(BaseModel):
    sections: List[Dict[str, Any]] = Field(default_factory=list)
    title:    str                  = ""


class Operation(BaseModel):
    sections: List[Dict[str, Any]] = Field(default_factory=list)
    op: Literal["insert", "delete", "move_up", "move_down", "reorder",
                "duplicate", "update_content", "update_styles"]
    block_id:     Optional[str]            = None
    block_type:   Optional[str]            = None
    position:     Optional[int]            = None
    target_index: Optional[int]            = None
    content:      Optional[Dict[str, Any]] = None
    styles:       Optional[Dict[str, Any]] = None


class SavePage(BaseModel):
    sections: List[Dict[str, Any]] = Field(default_factory=list)
    version:  Optional[int]        = None
    title:    Optional[str]        = None
    slug:     Optional[str]        = None


class BuilderContent(BaseModel):
    content: str = "[]"


def _collaborator_error(e: Exception) -> HTTPException:
    log.error("Collaborateur en échec : %s", e)
    return HTTPException(502, str(e))


def _result_json(value: Any) -> Any:
    return value.to_json() if hasattr(value, "to_json") else value


# ── Catalogue, rendu, validation ────────────────────────────────────────────

@router.get("/catalog", summary="Liste les blocs disponibles et leurs schemas")
def catalog() -> dict:
    return {"blocks": block_catalog()}


@router.post("/render", response_class=HTMLResponse, summary="Rend une liste de sections en HTML")
def render(payload: SectionsPayload, edit: bool = False,
           user: CurrentUser = Depends(get_user),
           feed: Optional[PilgrimageFeed] = Depends(get_feed)) -> HTMLResponse:
    sections = PageSectionList(payload.sections)
    editor = SectionEditor(sections, user=user)
    if edit:
        editor.enter_edit_mode()
    return HTMLResponse(render_page(sections, payload.title, editor, feed))


@router.post("/validate", summary="Valide une liste de sections sans la rendre")
def validate(payload: SectionsPayload) -> dict:
    """Blocs illisibles → valid=False ; blocs de type inconnu signalés mais tolérés."""
    sections = PageSectionList(payload.sections)
    invalid = {b.id: b.error for b in sections if isinstance(b, InvalidBlock)}
    unknown = [b.id for b in sections if isinstance(b, UnknownBlock) and b.id not in invalid]
    return {"valid": not invalid, "unknown": unknown, "invalid": invalid, "sections": sections.to_json()}


@router.post("/apply", summary="Applique une opération d'édition à une liste de sections")
def apply(operation: Operation, _: CurrentUser = Depends(require_editor)) -> dict:
    sections = PageSectionList(operation.sections)
    o = operation
    try:
        if o.op == "insert":
            result = sections.insert(o.block_type or "", o.position)
        elif o.op == "delete":
            result = sections.delete(o.block_id or "")
        elif o.op in ("move_up", "move_down", "duplicate"):
            result = getattr(sections, o.op)(o.block_id or "")
        elif o.op == "reorder":
            result = sections.reorder(o.block_id or "", o.target_index or 0)
        elif o.op == "update_content":
            result = sections.update_content(o.block_id or "", o.content or {})
        else:
            result = sections.update_styles(o.block_id or "", o.styles or {})
    except UnknownBlockType as e:
        raise HTTPException(400, str(e))
    return {"sections": sections.to_json(), "result": _result_json(result)}


# ── Pages persistées ────────────────────────────────────────────────────────

@router.get("/pages/{page_id}", summary="Charge une page")
def load_page(page_id: str, gateway: PersistenceGateway = Depends(get_gateway)) -> dict:
    try:
        doc = gateway.load(page_id)
    except PersistenceError as e:
        raise _collaborator_error(e)
    return doc.model_dump(mode="json")


@router.put("/pages/{page_id}", summary="Sauvegarde la liste entière d'une page")
def save_page(page_id: str, payload: SavePage,
              gateway: PersistenceGateway = Depends(get_gateway),
              user: CurrentUser = Depends(require_editor)) -> dict:
    sections = PageSectionList(payload.sections)
    try:
        doc: PageDocument = gateway.save(
            page_id, sections, expected_version=payload.version,
            title=payload.title, slug=payload.slug,
        )
    except VersionConflict as e:
        raise HTTPException(409, {"error": str(e), "version": e.actual})
    except PersistenceError as e:
        raise _collaborator_error(e)
    log.info("Page %s sauvegardée par %s (v%d)", page_id, user.username or user.role, doc.version)
    return doc.model_dump(mode="json")


@router.get("/pages/{page_id}/html", response_class=HTMLResponse, summary="Rend une page persistée")
def page_html(page_id: str, edit: bool = False,
              gateway: PersistenceGateway = Depends(get_gateway),
              user: CurrentUser = Depends(get_user),
              feed: Optional[PilgrimageFeed] = Depends(get_feed)) -> HTMLResponse:
    editor = SectionEditor(user=user)
    try:
        doc = editor.load(gateway, page_id)
    except PersistenceError as e:
        raise _collaborator_error(e)
    if edit:
        editor.enter_edit_mode()
    return HTMLResponse(render_page(editor.sections, doc.title, editor, feed))


@router.post("/builder/render", response_class=HTMLResponse, summary="Rend une page du builder")
def builder_render(payload: BuilderContent,
                   cms: Optional[CmsClient] = Depends(get_cms)) -> HTMLResponse:
    try:
        return HTMLResponse(render_builder_content(payload.content, cms))
    except CollaboratorError as e:
        raise _collaborator_error(e)


# ── Upload d'images (formulaires image / hero / bannere) ────────────────────

@router.post("/uploads/image", summary="Envoie une image, retourne son URL")
def upload_image(
    image: UploadFile = File(...),
    uploader: ImageUploader = Depends(get_uploader),
    _: CurrentUser = Depends(require_editor),
) -> dict:
    try:
        url = uploader.upload(image.filename or "", image.file)
    except InvalidUpload as e:
        raise HTTPException(400, str(e))
    except CollaboratorError as e:
        raise _collaborator_error(e)
    return {"url": url}
