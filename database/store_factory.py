"""
Store Factory — create the right state store backend from configuration.

Configuration in settings.yaml:
    storage:
      #   "memory"  : in-memory dicts (development, testing)
      #   "file"    : one JSON file per conversation (small deployments)
      #   "sql"     : SQLAlchemy database at `url`
      backend: "memory"
      file_dir: "./data"
      url: "sqlite:///./concierge.db"

Usage:
    from database.store_factory import create_store, get_store
    store = create_store(settings.storage)   # a new store for this config
    store = get_store()                      # process-wide store from settings
"""
from __future__ import annotations

from typing import Optional

import structlog

from config.settings import StorageConfig, get_settings
from database.store_base import BaseStateStore

logger = structlog.get_logger()

_instance: Optional[BaseStateStore] = None


def create_store(config: Optional[StorageConfig] = None) -> BaseStateStore:
    """Build a new store for `config`. Never touches the get_store() singleton."""
    config = config or StorageConfig()
    backend = config.backend

    if backend == "sql":
        from database.store_sql import SqlStateStore
        store = SqlStateStore(config.url)
        logger.info("store_created", backend="sql")

    elif backend == "file":
        from database.store_file import FileStateStore
        store = FileStateStore(data_dir=config.file_dir)
        logger.info("store_created", backend="file", data_dir=config.file_dir)

    elif backend == "memory":
        from database.store_memory import InMemoryStateStore
        store = InMemoryStateStore()
        logger.info("store_created", backend="memory")

    else:
        raise ValueError(f"Unknown storage backend '{backend}' (expected memory, file or sql)")

    return store


def get_store() -> BaseStateStore:
    """Return the process-wide store, built from the loaded settings on first use."""
    global _instance
    if _instance is None:
        _instance = create_store(get_settings().storage)
    return _instance


def reset_store() -> None:
    """Reset the singleton (for testing)."""
    global _instance
    _instance = None
