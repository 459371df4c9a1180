"""Paramètres lus depuis l'environnement."""
import os

API_URL       = os.getenv("DOXA_API_URL", "http://localhost:5000")
GATEWAY       = os.getenv("DOXA_GATEWAY", "memory")          # memory | http
HTTP_TIMEOUT  = float(os.getenv("DOXA_HTTP_TIMEOUT", "10"))
EDITOR_ROLES  = tuple(
    r.strip() for r in os.getenv("DOXA_EDITOR_ROLES", "admin").split(",") if r.strip()
)
LOG_LEVEL     = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS  = [o.strip() for o in os.getenv("DOXA_CORS_ORIGINS", "*").split(",") if o.strip()]
