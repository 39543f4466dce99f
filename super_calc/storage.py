"""Asynchronous key-value persistence for Super Calc.

Values are plain strings (callers store serialized JSON). Two backends:
- JsonFileStore: a single JSON object file, e.g. <home>/storage.json
- MemoryStore: an in-process dict

Every mutation is awaited and serialized, so a later write can never be
overtaken by an earlier one still in flight.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .errors import StorageError

logger = logging.getLogger(__name__)

HISTORY_KEY = "calculatorHistory"
THEME_KEY = "theme"


class KeyValueStore(Protocol):
    """Persistence adapter interface."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Store every key in one JSON object file.

    File I/O runs in the default executor; mutations are serialized with an
    asyncio.Lock and written atomically (temp file + os.replace).
    """

    def __init__(self, path):
        """Initialize with the storage file path.

        Args:
            path: JSON file to read and write. Parent directories are created
                on first write.
        """
        self.path = Path(path)
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path}")
        return data

    def _write_all(self, data: Dict[str, str]):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=".storage-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def _update(self, key: str, value: Optional[str]):
        data = self._read_all()
        if value is None:
            if key not in data:
                return
            data.pop(key)
        else:
            data[key] = value
        self._write_all(data)

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def get(self, key: str) -> Optional[str]:
        async with self._get_lock():
            data = await self._run(self._read_all)
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Value for {key!r} is not a string")
        return value

    async def set(self, key: str, value: str) -> None:
        async with self._get_lock():
            await self._run(self._update, key, value)
        logger.debug("Stored %s (%d bytes)", key, len(value))

    async def remove(self, key: str) -> None:
        async with self._get_lock():
            await self._run(self._update, key, None)
        logger.debug("Removed %s", key)


def get_store(home) -> JsonFileStore:
    """Get the file store for a data directory.

    Args:
        home: Data directory.

    Returns:
        JsonFileStore writing <home>/storage.json.
    """
    return JsonFileStore(Path(home) / "storage.json")
