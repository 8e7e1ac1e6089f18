from __future__ import annotations

import json
import os
from threading import Lock
from typing import Protocol

from catalog_console.infrastructure.logging import get_logger

logger = get_logger(__name__)


class LocalStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryLocalStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._lock = Lock()
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._values)


class FileLocalStorage:
    """Durable key/value storage kept in a single JSON file."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read()
            values[key] = value
            self._write(values)

    def remove(self, key: str) -> None:
        with self._lock:
            values = self._read()
            if key not in values:
                return
            del values[key]
            self._write(values)

    def _read(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, ValueError) as exc:
            # A corrupt file is treated as empty; the session layer then
            # sees no persisted state and starts unauthenticated.
            logger.warning("local_storage_unreadable", path=self.path, error=str(exc))
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(key): str(value) for key, value in raw.items() if value is not None}

    def _write(self, values: dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        temp_path = f"{self.path}.tmp"
        # Holds a bearer token: owner read/write only.
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(values, handle, indent=2, sort_keys=True)
        os.chmod(temp_path, 0o600)
        os.replace(temp_path, self.path)
