"""Hiérarchie d'erreurs du page builder Doxa."""


class DoxaBuilderError(Exception):
    """Erreur de base du module."""


class UnknownBlockType(DoxaBuilderError, ValueError):
    """Type de bloc absent du registry (erreur de l'appelant, jamais des données stockées)."""

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Type de bloc inconnu : {block_type!r}")


class PersistenceError(DoxaBuilderError):
    """Échec du Persistence Gateway (réseau, serveur). La liste en mémoire reste intacte."""


class VersionConflict(PersistenceError):
    """La page a été sauvegardée entre-temps par une autre session."""

    def __init__(self, page_id: str, expected: int, actual: int):
        self.page_id = page_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Conflit de version sur la page {page_id!r} : attendu {expected}, trouvé {actual}"
        )


class CollaboratorError(DoxaBuilderError):
    """Erreur HTTP d'un collaborateur externe (CMS, flux pèlerinages, upload)."""


class InvalidUpload(CollaboratorError, ValueError):
    """Fichier refusé avant envoi (extension non autorisée, fichier vide)."""
