"""
Database layer — multi-backend persistence for conversation state.

Backends:
  - In-memory (dict-based, for development/testing)
  - File (JSON files on disk, for small deployments)
  - SQL (PostgreSQL / MySQL / SQLite via SQLAlchemy async)

Quick start:
  from database import create_store
  store = create_store(settings.storage)
  state = await store.read("chat/conversations/c1")
"""
from database.store_base import BaseStateStore, to_storable
from database.store_factory import create_store, get_store, reset_store
from database.store_file import FileStateStore
from database.store_memory import InMemoryStateStore

__all__ = [
    "BaseStateStore", "to_storable",
    "InMemoryStateStore", "FileStateStore",
    "create_store", "get_store", "reset_store",
]
