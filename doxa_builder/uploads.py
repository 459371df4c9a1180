"""
Collaborateur d'upload d'images : fichier binaire → URL stable.
Utilisé par les formulaires des blocs `image` (et `hero`, `banners`).
"""
import logging
import mimetypes
from pathlib import Path
from typing import BinaryIO, Optional, Union

import requests as http

from . import config
from .exceptions import CollaboratorError, InvalidUpload

log = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"}


class ImageUploader:

    def __init__(self, base_url: Optional[str] = None, session: Optional[http.Session] = None,
                 timeout: Optional[float] = None, path: str = "/api/cms/upload"):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.session = session or http.Session()
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.path = path

    def upload(self, filename: str, data: Union[bytes, BinaryIO]) -> str:
        """Envoie l'image, retourne l'URL renvoyée par le backend."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidUpload(f"Extension non autorisée : {ext or '(aucune)'}")
        content = data if isinstance(data, bytes) else data.read()
        if not content:
            raise InvalidUpload("Fichier vide")
        mime = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            r = self.session.post(
                f"{self.base_url}{self.path}",
                files={"image": (filename, content, mime)},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except http.RequestException as e:
            raise CollaboratorError(f"Upload de {filename} impossible : {e}") from e
        url = (r.json() or {}).get("url")
        if not url:
            raise CollaboratorError(f"Upload de {filename} : réponse sans URL")
        log.info("Image %s uploadée → %s", filename, url)
        return url
