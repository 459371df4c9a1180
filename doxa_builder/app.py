"""
Application FastAPI du page builder.
Démarrer : uvicorn doxa_builder.app:app --reload --port 8001
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__, config
from .exceptions import CollaboratorError, PersistenceError, UnknownBlockType, VersionConflict
from .router import router

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = FastAPI(title="Doxa page builder", version=__version__, docs_url="/docs")
    app.add_middleware(CORSMiddleware, allow_origins=config.CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])
    app.include_router(router)

    @app.exception_handler(UnknownBlockType)
    async def _unknown_type(request: Request, exc: UnknownBlockType):
        return JSONResponse({"detail": str(exc)}, status_code=400)

    @app.exception_handler(VersionConflict)
    async def _conflict(request: Request, exc: VersionConflict):
        return JSONResponse({"detail": {"error": str(exc), "version": exc.actual}}, status_code=409)

    @app.exception_handler(PersistenceError)
    @app.exception_handler(CollaboratorError)
    async def _collaborator(request: Request, exc: Exception):
        log.error("%s %s : %s", request.method, request.url.path, exc)
        return JSONResponse({"detail": str(exc)}, status_code=502)

    @app.exception_handler(ValidationError)
    async def _invalid(request: Request, exc: ValidationError):
        return JSONResponse({"detail": jsonable_encoder(exc.errors(include_url=False))}, status_code=422)

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__, "gateway": config.GATEWAY}

    log.info("Doxa page builder %s prêt (gateway=%s)", __version__, config.GATEWAY)
    return app


app = create_app()
