"""
InMemoryStateStore — dict-backed store for development and testing.

Values are kept as JSON text, so every read hands back an independent
copy and nothing a caller mutates after write() leaks into the store.
All data is lost on process restart.
"""
from __future__ import annotations

import json
from typing import Any, Optional

import structlog

from database.store_base import BaseStateStore, to_storable

logger = structlog.get_logger()


class InMemoryStateStore(BaseStateStore):

    backend = "memory"

    def __init__(self):
        self._data: dict[str, str] = {}
        logger.info("inmemory_store_initialized")

    async def read(self, key: str) -> Optional[dict[str, Any]]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def write(self, key: str, state: dict[str, Any]) -> None:
        self._data[key] = json.dumps(to_storable(state))

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def keys(self) -> list[str]:
        return sorted(self._data)

    # ── Stats (for debugging) ─────────────────────────────

    def stats(self) -> dict[str, int]:
        return {"keys": len(self._data), "bytes": sum(len(v) for v in self._data.values())}
