"""
SQLAlchemy ORM models — cross-database compatible.

Supports: PostgreSQL, MySQL 8+, SQLite.

JSON rather than JSONB: on PG the dialect maps JSON to jsonb-compatible
storage, MySQL uses native JSON, SQLite serializes to TEXT.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all ORM models."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationStateRow(Base):
    __tablename__ = "conversation_state"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    data: Mapped[Any] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )
