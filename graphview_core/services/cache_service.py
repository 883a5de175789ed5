"""
    LocalCacheSynchronizer - one in-memory source of truth per storage key.

    Design Pattern: Identity Map
    ────────────────────────────
    Every consumer that reads the same key receives the same value object.
    The cache is populated lazily on the first read and changes only through
    ``write``, which persists first and then updates the cache, so a write
    by one consumer is visible to all others without re-reading storage.

    The synchronizer is an explicit service object: the platform creates one
    and passes it by reference to every consumer.  Reads and writes come
    from a single logical thread; concurrent writers to a key are
    last-write-wins.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, TypeVar, Union

from ..storage import StorageBackend

logger = logging.getLogger(__name__)

T = TypeVar('T')

Serializer = Callable[[T], Union[str, bytes]]
Deserializer = Callable[[str], T]


class LocalCacheSynchronizer:
    """
    Mediates between a persistent key/value store and many consumers.

    Usage:
        cache = LocalCacheSynchronizer(FileStorage(path))
        settings = cache.read('APP::SETTINGS', parse_settings, StoredSettings)
        cache.write('APP::SETTINGS', new_settings, dump_settings)
    """

    def __init__(self, storage: StorageBackend):
        self._storage = storage
        self._cache: Dict[str, Any] = {}

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    def read(self, key: str, deserializer: Deserializer, default_factory: Callable[[], T]) -> T:
        """
        Return the cached value for ``key``, loading it on first access.

        Missing bytes, unreadable storage and deserialization failures all
        resolve to ``default_factory()``; none of them is raised.
        """
        if key in self._cache:
            return self._cache[key]

        value = self._load(key, deserializer, default_factory)
        self._cache[key] = value
        return value

    def write(self, key: str, value: T, serializer: Serializer) -> None:
        """Serialize and persist ``value``, then make it the cached value."""
        raw = serializer(value)
        if isinstance(raw, str):
            raw = raw.encode('utf-8')
        self._storage.write(key, raw)
        self._cache[key] = value

    def is_cached(self, key: str) -> bool:
        return key in self._cache

    def bind(self, handler: 'CacheHandler[T]') -> 'CachedValue[T]':
        """Return an accessor for one key described by ``handler``."""
        return CachedValue(self, handler)

    def _load(self, key: str, deserializer: Deserializer, default_factory: Callable[[], T]) -> T:
        try:
            raw = self._storage.read(key)
        except OSError as exc:
            logger.warning("Failure to read stored value '%s': %s", key, exc)
            return default_factory()

        if raw is None:
            return default_factory()

        try:
            return deserializer(raw.decode('utf-8'))
        except Exception as exc:
            logger.warning("Failure to parse stored value as '%s': %s", key, exc)
            return default_factory()

    def __repr__(self) -> str:
        return f"LocalCacheSynchronizer(storage={self._storage!r}, cached={len(self._cache)})"


@dataclass(frozen=True)
class CacheHandler(Generic[T]):
    """Everything needed to load and store one key."""
    storage_key: str
    serialize: Serializer
    deserialize: Deserializer
    default_factory: Callable[[], T]


class CachedValue(Generic[T]):
    """Accessor for a single cached key."""

    def __init__(self, cache: LocalCacheSynchronizer, handler: CacheHandler[T]):
        self._cache = cache
        self._handler = handler

    @property
    def data(self) -> T:
        h = self._handler
        return self._cache.read(h.storage_key, h.deserialize, h.default_factory)

    def save(self, value: T) -> None:
        self._cache.write(self._handler.storage_key, value, self._handler.serialize)

    def __repr__(self) -> str:
        return f"CachedValue('{self._handler.storage_key}')"
