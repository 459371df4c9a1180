"""
doxa_builder : page builder de la place de marché de pèlerinages Doxa.

Une page = liste ordonnée de blocs typés (PageSectionList), éditée en place
par un SectionEditor, rendue en HTML, persistée en entier via un gateway.
"""
__version__ = "0.1.0"

from .blocks import Block, InvalidBlock, UnknownBlock, parse_block, parse_blocks
from .builder import BuilderComponent, BuilderPage, BuilderSection
from .cms import CmsClient, CmsEntry
from .editor import SectionEditor
from .exceptions import (
    CollaboratorError,
    DoxaBuilderError,
    InvalidUpload,
    PersistenceError,
    UnknownBlockType,
    VersionConflict,
)
from .feed import HttpPilgrimageFeed, Pilgrimage, PilgrimageFeed, PilgrimageFilters, StaticFeed
from .gateway import HttpGateway, InMemoryGateway, PageDocument, PersistenceGateway
from .gestures import DragSession
from .registry import block_types, catalog, default_content, new_block
from .sections import PageSectionList
from .uploads import ImageUploader

__all__ = [
    "__version__",
    "Block", "InvalidBlock", "UnknownBlock", "parse_block", "parse_blocks",
    "BuilderComponent", "BuilderPage", "BuilderSection",
    "SectionEditor", "DragSession", "PageSectionList",
    "CmsClient", "CmsEntry", "ImageUploader",
    "HttpPilgrimageFeed", "Pilgrimage", "PilgrimageFeed", "PilgrimageFilters", "StaticFeed",
    "CollaboratorError", "DoxaBuilderError", "InvalidUpload", "PersistenceError",
    "UnknownBlockType", "VersionConflict",
    "HttpGateway", "InMemoryGateway", "PageDocument", "PersistenceGateway",
    "block_types", "catalog", "default_content", "new_block",
]
