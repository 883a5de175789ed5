# tests/conftest.py
"""
Shared test fixtures.
Stub data set: a small project hierarchy with 8 nodes (two compound
groups, one nested) and 5 edges, one of which points at a node the
data set does not define.
"""
import pytest

from graphview_api.models.dataset import DataSet
from graphview_api.models.edge import Edge
from graphview_api.models.node import Node
from graphview_api.models.view_state import Camera, Position, ViewState

from graphview_core.engine import InMemoryRenderingEngine
from graphview_core.storage import MemoryStorage
from graphview_core.services.cache_service import LocalCacheSynchronizer
from graphview_core.graph_platform.config import PlatformConfig
from graphview_core.graph_platform.core import GraphViewPlatform
from graphview_core.graph_platform.plugin_loader import create_data_source_loader

from data_source_plugin_json.plugin import JsonDataSourcePlugin


# ── Node definitions (id, label, parent, attributes) ─────────────
_NODES = [
    ("app",      "Application", None,      dict(Kind="system")),
    ("frontend", "Frontend",    "app",     dict(Kind="group")),
    ("backend",  "Backend",     "app",     dict(Kind="group")),
    ("ui",       "UI",          "frontend", dict(Kind="module", Lines=1200)),
    ("router",   "Router",      "frontend", dict(Kind="module", Lines=300)),
    ("api",      "API",         "backend", dict(Kind="module", Lines=2100)),
    ("db",       "Database",    "backend", dict(Kind="module", Lines=800)),
    ("docs",     "Docs",        None,      dict(Kind="doc")),
]

# ── Edge definitions (source, target, label) ─────────────────────
_EDGES = [
    ("ui",     "router", "navigates"),
    ("router", "api",    "calls"),
    ("api",    "db",     "queries"),
    ("docs",   "api",    "describes"),
    # "cache" is not a node of the data set → placeholder
    ("api",    "cache",  "reads"),
]


def _build_dataset() -> DataSet:
    # Children listed before their parents on purpose: insertion order must
    # not depend on input order
    nodes = [Node(i, label=l, parent=p, **a) for i, l, p, a in reversed(_NODES)]
    edges = [Edge(s, t, l) for s, t, l in _EDGES]
    return DataSet(nodes, edges)


# ── Pytest fixtures ──────────────────────────────────────────────

@pytest.fixture
def stub_dataset() -> DataSet:
    """8 nodes in a two-level hierarchy, 5 edges, one dangling endpoint."""
    return _build_dataset()


@pytest.fixture
def simple_dataset() -> DataSet:
    """A with child B, one edge A → B."""
    return DataSet.from_dict({
        'nodes': {'A': {'label': 'A'}, 'B': {'label': 'B', 'parent': 'A'}},
        'edges': [{'source': 'A', 'target': 'B', 'label': 'e'}],
    })


@pytest.fixture
def engine() -> InMemoryRenderingEngine:
    return InMemoryRenderingEngine()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def cache(storage) -> LocalCacheSynchronizer:
    return LocalCacheSynchronizer(storage)


@pytest.fixture
def sample_view_state() -> ViewState:
    return ViewState.create(
        positions={'ui': Position(10, 20), 'api': Position(-5, 40.5)},
        camera=Camera(Position(100, 50), 1.5),
        selected={'api'},
        collapsed={'frontend'},
        locked=True,
    )


@pytest.fixture
def data_source_loader():
    """Loader limited to the JSON plugin (no entry-point discovery)."""
    loader = create_data_source_loader(discover=False)
    loader.register('json', JsonDataSourcePlugin())
    return loader


@pytest.fixture
def platform(engine, storage, data_source_loader) -> GraphViewPlatform:
    return GraphViewPlatform(
        config=PlatformConfig(),
        engine=engine,
        storage=storage,
        data_source_loader=data_source_loader,
    )


@pytest.fixture
def stub_source(stub_dataset) -> dict:
    """Inline JSON descriptor for the stub data set."""
    source = {'type': 'json'}
    source.update(stub_dataset.to_dict())
    return source
