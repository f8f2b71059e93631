"""
SqlStateStore — conversation state in a single `conversation_state` table.

Portable across PostgreSQL, MySQL 8+ and SQLite; the JSON column is
decoded in Python when a driver hands it back as text.
"""
from __future__ import annotations

import json
from typing import Any, Optional

import structlog
from sqlalchemy import delete, select

from database.models import ConversationStateRow
from database.session import close_db, get_session, init_db
from database.store_base import BaseStateStore, to_storable

logger = structlog.get_logger()


class SqlStateStore(BaseStateStore):

    backend = "sql"

    def __init__(self, url: Optional[str] = None):
        self._url = url
        self._ready = False

    async def _ensure_schema(self) -> None:
        if not self._ready:
            await init_db(self._url)
            self._ready = True

    async def read(self, key: str) -> Optional[dict[str, Any]]:
        await self._ensure_schema()
        async with get_session(self._url) as db:
            row = await db.get(ConversationStateRow, key)
            if row is None:
                return None
            data = row.data
            # Handle both dict and string (some drivers return JSON as text)
            if isinstance(data, str):
                data = json.loads(data)
            return data

    async def write(self, key: str, state: dict[str, Any]) -> None:
        await self._ensure_schema()
        data = to_storable(state)
        async with get_session(self._url) as db:
            row = await db.get(ConversationStateRow, key)
            if row is None:
                db.add(ConversationStateRow(key=key, data=data))
            else:
                row.data = data

    async def delete(self, key: str) -> bool:
        await self._ensure_schema()
        async with get_session(self._url) as db:
            result = await db.execute(
                delete(ConversationStateRow).where(ConversationStateRow.key == key)
            )
            return (result.rowcount or 0) > 0

    async def keys(self) -> list[str]:
        await self._ensure_schema()
        async with get_session(self._url) as db:
            result = await db.execute(
                select(ConversationStateRow.key).order_by(ConversationStateRow.key)
            )
            return list(result.scalars())

    async def close(self) -> None:
        await close_db(self._url)
        self._ready = False
