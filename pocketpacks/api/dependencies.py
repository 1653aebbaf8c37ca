"""
Shared FastAPI dependencies.

The session registry and catalog live on app.state; they are created in
the application lifespan and overridden in tests.
"""

from fastapi import Request

from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.session_registry import SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    registry: SessionRegistry = request.app.state.registry
    return registry


def get_catalog(request: Request) -> CatalogRegistry:
    catalog: CatalogRegistry = request.app.state.catalog
    return catalog
