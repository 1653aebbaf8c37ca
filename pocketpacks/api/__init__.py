from pocketpacks.api.catalog import router as catalog_router
from pocketpacks.api.collection import router as collection_router
from pocketpacks.api.health import router as health_router
from pocketpacks.api.history import router as history_router
from pocketpacks.api.packs import router as packs_router

__all__ = [
    "catalog_router",
    "collection_router",
    "health_router",
    "history_router",
    "packs_router",
]
