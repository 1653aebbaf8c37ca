"""
Database CRUD operations for save documents.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketpacks.models.db import SaveDocumentDB


async def get_save_document(session: AsyncSession, save_id: str) -> SaveDocumentDB | None:
    """
    Get a save slot by save_id.

    Returns None if nothing has been saved under this id.
    """
    result = await session.execute(select(SaveDocumentDB).where(SaveDocumentDB.save_id == save_id))
    return result.scalar_one_or_none()


async def upsert_save_document(
    session: AsyncSession,
    save_id: str,
    document: dict[str, Any],
    schema_version: int,
) -> SaveDocumentDB:
    """
    Insert or replace a save slot's document.

    The whole document is written every time, so a write after an
    earlier failure flushes the complete current state.
    """
    existing = await get_save_document(session, save_id)

    if existing:
        existing.document = document
        existing.schema_version = schema_version
        await session.flush()
        return existing

    record = SaveDocumentDB(save_id=save_id, document=document, schema_version=schema_version)
    session.add(record)
    await session.flush()
    return record


async def delete_save_document(session: AsyncSession, save_id: str) -> bool:
    """
    Delete a save slot.

    Returns True if deleted, False if not found.
    """
    existing = await get_save_document(session, save_id)
    if not existing:
        return False

    await session.delete(existing)
    return True
