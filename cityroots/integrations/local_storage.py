"""File-backed key/value store with browser ``localStorage`` semantics.

Values are strings; the whole store is one JSON object rewritten on every
``set_item``/``remove_item``. Concurrent writers race with last-write-wins.
"""
from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path

from cityroots.core.constants import SESSION_STORAGE_KEY
from cityroots.core.exceptions import StorageException

logger = logging.getLogger(__name__)


class LocalStorage:
    def __init__(self, path: str | os.PathLike[str]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageException(f"Cannot read local storage {self._path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageException(f"Local storage {self._path} is corrupt: {e}") from e
        if not isinstance(data, dict):
            raise StorageException(f"Local storage {self._path} is not a JSON object")
        return {str(key): str(value) for key, value in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageException(f"Cannot write local storage {self._path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageException as e:
            # A corrupt file is replaced rather than blocking every write
            logger.warning("Resetting unreadable local storage: %s", e)
            data = {}
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        self._write_all(data)


def get_session_id(storage: LocalStorage) -> str:
    """Return the anonymous session token, minting one on first visit."""
    try:
        session_id = storage.get_item(SESSION_STORAGE_KEY)
    except StorageException as e:
        logger.warning("Session id unreadable, minting a new one: %s", e)
        session_id = None

    if not session_id:
        session_id = str(uuid.uuid4())
        try:
            storage.set_item(SESSION_STORAGE_KEY, session_id)
        except StorageException as e:
            logger.error("Failed to persist session id: %s", e)
    return session_id
