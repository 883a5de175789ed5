"""
    Stored settings and saved queries.

    Both live in persistent storage and are read through the shared
    ``LocalCacheSynchronizer``, so every consumer (settings editor, graph
    database adapter, CLI) sees the same value right after a save.
"""
import json
import uuid
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from graphview_core.services.cache_service import CacheHandler, CachedValue, LocalCacheSynchronizer


@dataclass
class Neo4jServer:
    unique_id: str
    name: str = ""
    url: str = ""
    user: str = ""
    password: str = ""


@dataclass
class StoredSettings:
    active_neo4j_server_id: Optional[str] = None
    neo4j_servers: List[Neo4jServer] = field(default_factory=list)

    def active_neo4j_server(self) -> Optional[Neo4jServer]:
        if not self.active_neo4j_server_id:
            return None
        return next((s for s in self.neo4j_servers
                     if s.unique_id == self.active_neo4j_server_id), None)


@dataclass
class SavedQuery:
    query_id: str
    name: str = ""
    query_string: str = ""

    @classmethod
    def create(cls, name: str = "", query_string: str = "") -> 'SavedQuery':
        return cls(str(uuid.uuid4()), name, query_string)


# ── (De)serializers ──────────────────────────────────────────────

def dump_settings(settings: StoredSettings) -> str:
    return json.dumps(asdict(settings))


def parse_settings(text: str) -> StoredSettings:
    """Missing fields fall back to defaults; a non-object document is rejected."""
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Settings document must be an object")
    servers = [
        Neo4jServer(
            unique_id=str(s.get('unique_id') or uuid.uuid4()),
            name=s.get('name', ''),
            url=s.get('url', ''),
            user=s.get('user', ''),
            password=s.get('password', ''),
        )
        for s in parsed.get('neo4j_servers') or []
        if isinstance(s, dict)
    ]
    return StoredSettings(parsed.get('active_neo4j_server_id'), servers)


def dump_queries(queries: List[SavedQuery]) -> str:
    return json.dumps([asdict(q) for q in queries])


def parse_queries(text: str) -> List[SavedQuery]:
    parsed = json.loads(text)
    if not isinstance(parsed, list):
        raise ValueError("Saved queries document must be a list")
    return [
        SavedQuery(
            query_id=item.get('query_id', ''),
            name=item.get('name', ''),
            query_string=item.get('query_string', ''),
        )
        for item in parsed
        if isinstance(item, dict)
    ]


def settings_handler(storage_key: str) -> CacheHandler[StoredSettings]:
    return CacheHandler(storage_key, dump_settings, parse_settings, StoredSettings)


def queries_handler(storage_key: str) -> CacheHandler[List[SavedQuery]]:
    return CacheHandler(storage_key, dump_queries, parse_queries, list)


class SettingsStore:
    """Typed access to stored settings and saved queries."""

    def __init__(self, cache: LocalCacheSynchronizer,
                 settings_key: str = "GRAPHVIEW::SETTINGS",
                 queries_key: str = "GRAPHVIEW::QUERIES"):
        self._settings: CachedValue[StoredSettings] = cache.bind(settings_handler(settings_key))
        self._queries: CachedValue[List[SavedQuery]] = cache.bind(queries_handler(queries_key))

    @property
    def settings(self) -> StoredSettings:
        return self._settings.data

    def save_settings(self, settings: StoredSettings) -> None:
        self._settings.save(settings)

    def active_neo4j_server(self) -> Optional[Neo4jServer]:
        return self.settings.active_neo4j_server()

    @property
    def queries(self) -> List[SavedQuery]:
        return self._queries.data

    def find_query(self, query_id: str) -> Optional[SavedQuery]:
        return next((q for q in self.queries if q.query_id == query_id), None)

    def save_query(self, query: SavedQuery) -> None:
        """Insert or replace ``query`` (matched by ``query_id``)."""
        queries = [q for q in self.queries if q.query_id != query.query_id]
        queries.append(query)
        self._queries.save(queries)
