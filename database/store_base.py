"""
Abstract state store — interface for all conversation-state backends.

Implementations:
  - InMemoryStateStore (dict-based, single-process, no persistence)
  - FileStateStore     (one JSON file per key, single-process, durable)
  - SqlStateStore      (PostgreSQL / MySQL / SQLite via SQLAlchemy)

A store persists opaque JSON-compatible dicts under string keys. It knows
nothing about dialogs; ConversationState decides the key layout.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic_core import to_jsonable_python


def to_storable(state: dict[str, Any]) -> dict[str, Any]:
    """Reduce pydantic models (dialog instances, prompt options) to plain JSON data."""
    return to_jsonable_python(state)


class BaseStateStore(ABC):
    """Interface that all state store backends must implement."""

    backend: str = "base"

    @abstractmethod
    async def read(self, key: str) -> Optional[dict[str, Any]]:
        """Return a fresh copy of the state stored under `key`, or None."""

    @abstractmethod
    async def write(self, key: str, state: dict[str, Any]) -> None:
        """Replace whatever is stored under `key`."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove `key`. Returns False when it was not stored."""

    @abstractmethod
    async def keys(self) -> list[str]:
        ...

    async def close(self) -> None:
        return None
