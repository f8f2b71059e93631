"""
FileStateStore — JSON file-backed store with persistence across restarts.

Data layout:
  {data_dir}/
    chat%2Fconversations%2Fconv-1.json
    ...

One file per key; the key is percent-encoded into the file name. Writes
go to a temp file that is renamed over the target (atomic on POSIX).
A file that cannot be read or parsed is logged and treated as missing,
so one corrupt conversation never takes the bot down.

Single-process only (no cross-process locking).
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote, unquote

import structlog

from database.store_base import BaseStateStore, to_storable

logger = structlog.get_logger()

_SUFFIX = ".json"


class FileStateStore(BaseStateStore):

    backend = "file"

    def __init__(self, data_dir: str = "./data"):
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        logger.info("file_store_initialized", data_dir=str(self._data_dir))

    def _file_path(self, key: str) -> Path:
        return self._data_dir / f"{quote(key, safe='')}{_SUFFIX}"

    async def read(self, key: str) -> Optional[dict[str, Any]]:
        path = self._file_path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("file_store_load_error", key=key, error=str(e))
            return None
        if not isinstance(data, dict):
            logger.warning("file_store_load_error", key=key, error="not a JSON object")
            return None
        return data

    async def write(self, key: str, state: dict[str, Any]) -> None:
        path = self._file_path(key)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(to_storable(state), f, indent=2)
        os.replace(tmp_path, path)

    async def delete(self, key: str) -> bool:
        path = self._file_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    async def keys(self) -> list[str]:
        return sorted(
            unquote(p.name[: -len(_SUFFIX)])
            for p in self._data_dir.glob(f"*{_SUFFIX}")
        )
