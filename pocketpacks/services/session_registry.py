"""
Session registry - loaded save slots and their persistence.

Each save slot is loaded (and migrated) once per process. After that the
in-memory CollectionService is the source of truth; writes are
best-effort and a failed write leaves the service dirty so the next
successful write flushes the full state.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pocketpacks.db.operations import get_save_document, upsert_save_document
from pocketpacks.models.points import current_time_ms
from pocketpacks.services.collection_service import CollectionService
from pocketpacks.services.pack_composer import PackComposer

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Loads, caches and persists CollectionService instances by save id."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        composer_factory: Callable[[], PackComposer] = PackComposer,
        clock: Callable[[], int] = current_time_ms,
        **service_options: Any,
    ) -> None:
        self._session_factory = session_factory
        self._composer_factory = composer_factory
        self._clock = clock
        self._service_options = service_options
        self._services: dict[str, CollectionService] = {}
        self._write_locks: dict[str, asyncio.Lock] = {}

    def __contains__(self, save_id: object) -> bool:
        return save_id in self._services

    def loaded_ids(self) -> list[str]:
        return list(self._services)

    async def get(self, save_id: str) -> CollectionService:
        """
        Get the service for a save slot, loading it on first use.

        Raises:
            SQLAlchemyError: If the stored document cannot be read.
        """
        service = self._services.get(save_id)
        if service is not None:
            return service

        async with self._session_factory() as session:
            stored = await get_save_document(session, save_id)

        # Another request may have finished loading while this one awaited.
        service = self._services.get(save_id)
        if service is not None:
            return service

        document = stored.document if stored else None
        version = stored.schema_version if stored else 0

        service, report = CollectionService.load(
            document,
            version,
            composer=self._composer_factory(),
            clock=self._clock,
            **self._service_options,
        )
        if report.skipped:
            logger.warning(
                "save_document_entries_skipped",
                extra={"save_id": save_id, "skipped": report.skipped[:10]},
            )
        self._services[save_id] = service

        if service.dirty:
            await self.save(save_id)
        return service

    async def save(self, save_id: str) -> bool:
        """
        Write a save slot's full document.

        Writes for one save id run one at a time, in call order. The
        service is only marked clean if it did not change while the
        snapshot was being written.

        Returns False (and logs) on a database error; the in-memory
        state is kept and stays dirty.
        """
        service = self._services.get(save_id)
        if service is None:
            return False

        lock = self._write_locks.setdefault(save_id, asyncio.Lock())
        async with lock:
            revision = service.revision
            document = service.to_document()
            try:
                async with self._session_factory() as session:
                    await upsert_save_document(
                        session, save_id, document, service.schema_version
                    )
                    await session.commit()
            except SQLAlchemyError as e:
                logger.error(
                    "save_write_failed",
                    extra={"save_id": save_id, "error": type(e).__name__},
                )
                return False

            service.mark_saved(revision)
        return True

    async def save_if_dirty(self, save_id: str) -> bool:
        service = self._services.get(save_id)
        if service is None or not service.dirty:
            return True
        return await self.save(save_id)

    async def database_available(self) -> bool:
        """Whether the save store answers a trivial query."""
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    async def regenerate_all(self, now_ms: int | None = None) -> int:
        """
        Run point regeneration for every loaded save and persist changes.

        Returns:
            Total points awarded.
        """
        now_ms = self._clock() if now_ms is None else now_ms
        awarded_total = 0
        for save_id, service in list(self._services.items()):
            awarded = service.regenerate(now_ms)
            if awarded:
                awarded_total += awarded
                await self.save_if_dirty(save_id)
        return awarded_total
