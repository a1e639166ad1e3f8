"""Key/value storage backends for the local adapter.

A minimal local-storage analogue: string values under string keys, with an
optional byte quota. ``FileStorage`` keeps one JSON-encoded file per key;
``MemoryStorage`` keeps everything in process.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path

from stride_cli.models import StorageError, StorageQuotaError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """String key/value store with an optional quota."""

    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            StorageQuotaError: If the write would exceed the quota
            StorageError: If the backend cannot write
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; unknown keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""

    def used_bytes(self, excluding: str | None = None) -> int:
        total = 0
        for key in self.keys():
            if key == excluding:
                continue
            value = self.get_item(key) or ""
            total += len(key.encode("utf-8")) + len(value.encode("utf-8"))
        return total

    def _check_quota(self, key: str, value: str) -> None:
        if self.quota_bytes is None:
            return
        needed = len(key.encode("utf-8")) + len(value.encode("utf-8"))
        if self.used_bytes(excluding=key) + needed > self.quota_bytes:
            raise StorageQuotaError(
                f"Writing '{key}' ({needed} bytes) exceeds the {self.quota_bytes} byte quota"
            )


class MemoryStorage(KeyValueStorage):
    """In-process storage; contents vanish with the process."""

    def __init__(self, quota_bytes: int | None = None):
        super().__init__(quota_bytes)
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_quota(key, value)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage(KeyValueStorage):
    """One file per key inside a data directory."""

    def __init__(self, directory: Path | str, quota_bytes: int | None = None):
        super().__init__(quota_bytes)
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        self._check_quota(key, value)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return sorted(path.stem for path in self.directory.glob("*.json"))
