"""Namespaced key/value store adapters.

The tracker only needs ``get``/``set`` on string values. Two adapters are
provided: an in-memory store and a JSON file store that survives process
restarts.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from patchtrack.exceptions import StoreError

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Synchronous, string-valued store addressed by ``(namespace, key)``."""

    def get(self, namespace: str, key: str) -> str | None: ...

    def set(self, namespace: str, key: str, value: str) -> None: ...


def _flat_key(namespace: str, key: str) -> str:
    return f"{namespace}.{key}"


class MemoryStore:
    """In-memory store. Contents are lost with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, namespace: str, key: str) -> str | None:
        return self._data.get(_flat_key(namespace, key))

    def set(self, namespace: str, key: str, value: str) -> None:
        self._data[_flat_key(namespace, key)] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of every entry, keyed ``<namespace>.<key>``."""
        return dict(self._data)


class JsonFileStore:
    """Store persisted as one flat JSON object.

    The file is read on first access. Every ``set`` rewrites it through a
    temporary file and ``os.replace`` so a crash never leaves a truncated
    document behind. An unreadable or non-object document is logged and
    treated as empty; it is overwritten by the next ``set``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        data: dict[str, str] = {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raw = {}
        except (OSError, json.JSONDecodeError):
            _logger.warning("Store file %s is unreadable; starting empty", self._path, exc_info=True)
            raw = {}

        if isinstance(raw, dict):
            data = {str(key): str(value) for key, value in raw.items()}
        else:
            _logger.warning("Store file %s does not hold a JSON object; starting empty", self._path)

        self._data = data
        return data

    def _flush(self, data: dict[str, str]) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"cannot write store file: {exc}", path=str(self._path)) from exc

    def get(self, namespace: str, key: str) -> str | None:
        return self._load().get(_flat_key(namespace, key))

    def set(self, namespace: str, key: str, value: str) -> None:
        updated = {**self._load(), _flat_key(namespace, key): value}
        self._flush(updated)
        self._data = updated

    def snapshot(self) -> dict[str, str]:
        return dict(self._load())
