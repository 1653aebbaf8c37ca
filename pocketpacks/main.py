import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from pocketpacks.api import (
    catalog_router,
    collection_router,
    health_router,
    history_router,
    packs_router,
)
from pocketpacks.config import settings
from pocketpacks.db.database import async_session_factory, init_db
from pocketpacks.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    create_unknown_failure,
    finalize_response,
)
from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.pack_composer import PackComposer, PackRules
from pocketpacks.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


async def regenerate_points_forever(registry: SessionRegistry, tick_seconds: float) -> None:
    """Award elapsed points to every loaded save on a fixed tick."""
    while True:
        await asyncio.sleep(tick_seconds)
        await registry.regenerate_all()


def build_registry() -> SessionRegistry:
    rules = PackRules.from_settings(settings)
    return SessionRegistry(
        async_session_factory,
        composer_factory=lambda: PackComposer(rules=rules),
        regen_interval_ms=settings.regen_interval_ms,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    app.state.catalog = CatalogRegistry()
    app.state.registry = build_registry()

    regen_task = asyncio.create_task(
        regenerate_points_forever(app.state.registry, settings.regen_tick_seconds)
    )
    yield
    regen_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await regen_task


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("pocketpacks"),
    lifespan=lifespan,
)

app.include_router(catalog_router)
app.include_router(collection_router)
app.include_router(health_router)
app.include_router(history_router)
app.include_router(packs_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("save_read_failed", extra={"error": type(exc).__name__})
    response: ApiResponse[None] = ApiResponse(
        outcome=OutcomeType.KNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.PERSISTENCE_UNAVAILABLE,
            message="Saved data could not be loaded.",
            suggestion="Try again shortly.",
        ),
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=finalize_response(response).model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error",
        extra={"path": request.url.path, "error": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_unknown_failure(exc).model_dump(mode="json"),
    )
