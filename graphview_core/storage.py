"""
    Persistent key/value storage.

    The platform only needs key-addressed byte reads and writes.  Two
    backends are provided: one file per key inside a directory, and an
    in-memory dict (used by tests and headless sessions).
"""
import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r'[^A-Za-z0-9._-]')


class StorageBackend(ABC):
    """Key-addressed byte storage."""

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """Return the stored bytes, or ``None`` if nothing is stored under ``key``."""
        ...

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Persist ``data`` under ``key`` before returning."""
        ...


class MemoryStorage(StorageBackend):

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def read(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def keys(self):
        return list(self._data.keys())

    def __repr__(self) -> str:
        return f"MemoryStorage(keys={len(self._data)})"


class FileStorage(StorageBackend):
    """
    One file per key inside ``directory``.

    Keys are mapped to file names by replacing every character outside
    ``[A-Za-z0-9._-]`` with ``_``.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Storage key cannot be empty.")
        return self._directory / _UNSAFE_KEY_CHARS.sub('_', key)

    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + '.tmp')
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
        logger.debug("Stored %d bytes under '%s'", len(data), key)

    def __repr__(self) -> str:
        return f"FileStorage('{self._directory}')"
