"""
SQLAlchemy ORM models for persistent storage.

Each save slot is one JSON document plus the schema version it was
written with.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class SaveDocumentDB(Base):
    """
    A persisted save slot.

    The document holds points, the regen anchor, the card ledger and the
    recently opened sets. The active selection is never stored.
    """

    __tablename__ = "save_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    save_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    schema_version: Mapped[int] = mapped_column(Integer, default=0)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<SaveDocumentDB(save_id={self.save_id}, version={self.schema_version})>"
