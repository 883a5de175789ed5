"""
    GraphViewPlatform - the central orchestrator of the application.

    Design Patterns applied
    ───────────────────────
    • Strategy           – pluggable data sources (selected by ``match``).
    • Facade             – single entry-point for shells (desktop, CLI);
                           hides plugin selection, storage, synchronization
                           and view-state persistence.
    • Observer (hooks)   – ``_listeners`` dict notified after every
                           synchronization, failed reload and save.
    • Dependency injection – storage, cache, engine and plugin loader are
                           created once here and handed to every consumer.

    Reload flow
    ───────────
    reload(source)
        → pick data source plugin          (source errors stop here)
        → await plugin.reload(source)      → DataSet
        → load persisted view state
        → drop the response if a newer reload started meanwhile
        → collect current view state
        → GraphSynchronizer.synchronize(...)
"""
import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from graphview_api.exceptions import DataSourceError
from graphview_api.models.dataset import DataSet
from graphview_api.models.view_state import ViewState
from graphview_api.plugins.base import DataSourcePlugin, RenderingEngine

from graphview_core.engine import InMemoryRenderingEngine
from graphview_core.storage import FileStorage, MemoryStorage, StorageBackend
from graphview_core.services.cache_service import LocalCacheSynchronizer
from graphview_core.services.exceptions import DeserializationError
from graphview_core.services.serialization_service import DataSetSerializer, ViewStateSerializer
from graphview_core.services.sync_service import GraphSynchronizer
from graphview_core.services.view_state_service import ViewStateStore

from .config import PlatformConfig
from .plugin_loader import PluginLoader, create_data_source_loader
from .settings import SettingsStore
from .workspace import Workspace

logger = logging.getLogger(__name__)


# ── Observer event types ─────────────────────────────────────────
EVENT_GRAPH_SYNCHRONIZED = "graph_synchronized"
EVENT_RELOAD_FAILED = "reload_failed"
EVENT_VIEW_STATE_SAVED = "view_state_saved"

DEFAULT_HANDLER_NAME = "default"


class DefaultDataSource(DataSourcePlugin):
    """Fallback handler: accepts any descriptor and yields an empty data set."""

    def get_plugin_name(self) -> str:
        return "Empty"

    def match(self, source_type: Optional[str]) -> bool:
        return True

    async def reload(self, source: Mapping[str, Any]) -> DataSet:
        return DataSet.empty()


class GraphViewPlatform:
    """
    Central orchestrator - Facade for the entire platform.

    Manages:
        • Data source selection and asynchronous reloads.
        • Rebuilding the live graph and restoring its view state.
        • Persistence of the target descriptor and the view state.
        • View actions (select all, lock, expand / collapse).
        • Observer hooks.
    """

    def __init__(
        self,
        config: Optional[PlatformConfig] = None,
        engine: Optional[RenderingEngine] = None,
        storage: Optional[StorageBackend] = None,
        data_source_loader: Optional[PluginLoader[DataSourcePlugin]] = None,
    ):
        """
        Args:
            config:             Platform configuration.
            engine:             Live graph (headless in-memory engine by default).
            storage:            Persistent storage (derived from ``config.storage_dir``
                                by default).
            data_source_loader: Plugin loader (entry-point discovery by default).
        """
        self._config: PlatformConfig = config or PlatformConfig()

        if storage is None:
            storage = (FileStorage(self._config.storage_dir)
                       if self._config.storage_dir else MemoryStorage())
        self._storage = storage
        self._cache = LocalCacheSynchronizer(storage)
        self._settings = SettingsStore(self._cache, self._config.settings_key,
                                       self._config.queries_key)

        self._engine: RenderingEngine = engine or InMemoryRenderingEngine()
        self._view_store = ViewStateStore(self._engine)
        self._synchronizer = GraphSynchronizer(strict_hierarchy=self._config.strict_hierarchy)
        self._dataset_serializer = DataSetSerializer(self._config.serialization)
        self._view_state_serializer = ViewStateSerializer(self._config.serialization)

        self._ds_loader: PluginLoader[DataSourcePlugin] = (
            data_source_loader or create_data_source_loader())
        self._default_handler = DefaultDataSource()
        self._attached: set = set()

        self._workspace = Workspace(max_history=self._config.max_history_depth)
        self._generation = 0
        self._in_flight = 0

        # Observer listeners: event_name → [callback, ...]
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}

        logger.info("GraphViewPlatform initialized.")

    # ── Accessors ────────────────────────────────────────────────

    @property
    def config(self) -> PlatformConfig:
        return self._config

    @property
    def engine(self) -> RenderingEngine:
        return self._engine

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    @property
    def cache(self) -> LocalCacheSynchronizer:
        return self._cache

    @property
    def settings(self) -> SettingsStore:
        return self._settings

    @property
    def view_state_store(self) -> ViewStateStore:
        return self._view_store

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def dataset_serializer(self) -> DataSetSerializer:
        return self._dataset_serializer

    @property
    def now_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def generation(self) -> int:
        """Stamp of the most recently started reload."""
        return self._generation

    # ── Data source selection ────────────────────────────────────

    def get_data_source_names(self) -> List[str]:
        """Sorted list of installed data-source plugin names."""
        return self._ds_loader.get_names()

    def define_handler(self, source: Optional[Mapping[str, Any]]) -> Tuple[str, DataSourcePlugin]:
        """
        Pick the plugin for ``source`` by its ``type``.

        Falls back to ``config.default_data_source`` when the descriptor has
        no type, and to an empty-data-set handler when nothing matches.
        """
        source_type = (source or {}).get('type') or self._config.default_data_source
        found = self._ds_loader.first(lambda p: p.match(source_type))
        if found is None:
            return DEFAULT_HANDLER_NAME, self._default_handler
        name, plugin = found
        if name not in self._attached:
            plugin.attach(self._settings)
            self._attached.add(name)
        return name, plugin

    # ── Reload ───────────────────────────────────────────────────

    async def reload(self, source: Optional[Mapping[str, Any]]) -> bool:
        """
        Load ``source`` and rebuild the live graph.

        Returns:
            ``True`` when the live graph was rebuilt, ``False`` when the
            response was discarded because a newer reload had started.

        Raises:
            DataSourceError:      The data could not be obtained; the live
                                  graph is left untouched.
            SynchronizationError: The rebuild failed; reload again.
        """
        source = dict(source or {})
        self._generation += 1
        generation = self._generation
        self._in_flight += 1
        try:
            name, handler = self.define_handler(source)
            try:
                dataset = await handler.reload(source)
            except DataSourceError as exc:
                self._notify(EVENT_RELOAD_FAILED, source=source, error=exc)
                raise
            except Exception as exc:
                error = DataSourceError(f"{handler.get_plugin_name()}: {exc}", source.get('type', ''))
                self._notify(EVENT_RELOAD_FAILED, source=source, error=error)
                raise error from exc

            just_loaded = self.load_view_state()

            if self._config.discard_stale_reloads and generation != self._generation:
                logger.info("Discarding stale reload #%d (latest is #%d)",
                            generation, self._generation)
                return False

            prior = self._view_store.collect()
            try:
                self._synchronizer.synchronize(self._engine, dataset, prior, just_loaded)
            except Exception as exc:
                self._notify(EVENT_RELOAD_FAILED, source=source, error=exc)
                raise

            self._workspace.update(source, dataset, name)
            logger.info("Reload #%d via '%s' → %r", generation, name, dataset)
            self._notify(EVENT_GRAPH_SYNCHRONIZED, workspace=self._workspace, dataset=dataset)
            return True
        finally:
            self._in_flight -= 1

    async def reload_current(self) -> bool:
        """Reload the descriptor of the current workspace (no-op without one)."""
        if not self._workspace.source:
            return False
        return await self.reload(self._workspace.source)

    async def open(self) -> bool:
        """Load the stored target descriptor and show it."""
        return await self.reload(self.load_target())

    # ── Persistence ──────────────────────────────────────────────

    def load_target(self) -> Optional[Dict[str, Any]]:
        """Read the stored data source descriptor, or ``None`` if absent or unreadable."""
        raw = self._storage.read(self._config.target_key)
        if raw is None:
            return None
        try:
            source = json.loads(raw.decode('utf-8'))
        except ValueError as exc:
            logger.warning("Failure to parse target document '%s': %s",
                           self._config.target_key, exc)
            return None
        if not isinstance(source, dict):
            logger.warning("Target document '%s' is not an object.", self._config.target_key)
            return None
        return source

    def save_target(self, source: Mapping[str, Any]) -> None:
        ser = self._config.serialization
        text = json.dumps(dict(source), indent=ser.indent, sort_keys=ser.sort_keys,
                          ensure_ascii=False)
        self._storage.write(self._config.target_key, text.encode('utf-8'))

    def load_view_state(self) -> Optional[ViewState]:
        """Read the persisted view state; unreadable documents yield ``None``."""
        raw = self._storage.read(self._config.view_state_key)
        if raw is None:
            return None
        try:
            return self._view_state_serializer.from_json(raw)
        except DeserializationError as exc:
            logger.warning("Failure to load view state '%s': %s",
                           self._config.view_state_key, exc)
            return None

    def save_view_state(self, view_state: Optional[ViewState] = None) -> ViewState:
        """Persist ``view_state`` (the current one by default) and return it."""
        if view_state is None:
            view_state = self._view_store.collect()
        text = self._view_state_serializer.to_json(view_state)
        self._storage.write(self._config.view_state_key, text.encode('utf-8'))
        self._notify(EVENT_VIEW_STATE_SAVED, view_state=view_state)
        return view_state

    def save_all(self) -> ViewState:
        """Save the target descriptor (if any) and the current view state."""
        if self._workspace.source:
            self.save_target(self._workspace.source)
        view_state = self.save_view_state()
        logger.info("Saved target and view state (%d positions)", len(view_state.positions))
        return view_state

    # ── View actions ─────────────────────────────────────────────

    def select_all(self) -> None:
        self._engine.set_selection(n.element_id for n in self._engine.nodes())

    def set_nodes_locked(self, locked: bool) -> None:
        self._engine.set_locked(locked)

    def toggle_nodes_locked(self) -> bool:
        locked = not self._engine.is_locked()
        self._engine.set_locked(locked)
        return locked

    def expand_selections(self) -> List[str]:
        targets = self._selected_compounds()
        with self._engine.batch():
            for node_id in targets:
                self._engine.expand(node_id)
        return targets

    def collapse_selections(self) -> List[str]:
        targets = self._selected_compounds()
        with self._engine.batch():
            for node_id in targets:
                self._engine.collapse(node_id)
        return targets

    def toggle_expand_collapse(self) -> List[str]:
        """Expand the selected groups if all are collapsed, otherwise collapse them."""
        targets = self._selected_compounds()
        if targets and all(self._engine.is_collapsed(t) for t in targets):
            return self.expand_selections()
        return self.collapse_selections()

    def describe_selection(self) -> str:
        """
        JSON detail of the first selected element (edge endpoints resolved),
        followed by a count of the remaining selected elements.
        """
        selection = self._engine.get_selection()
        ordered = ([n for n in self._engine.nodes() if n.element_id in selection]
                   + [e for e in self._engine.edges() if e.element_id in selection])
        if not ordered:
            return ""

        first = ordered[0]
        data = first.to_dict()
        if first.is_edge:
            for key in ('source', 'target'):
                endpoint = self._engine.get_element(data[key])
                if endpoint is not None:
                    data[key] = endpoint.to_dict()

        lines = [json.dumps(data, indent=2, ensure_ascii=False, default=str)]
        if len(ordered) >= 2:
            lines.append(f"... and {len(ordered) - 1} more selected")
        return "\n".join(lines)

    def _selected_compounds(self) -> List[str]:
        selection = self._engine.get_selection()
        return [n.element_id for n in self._engine.nodes()
                if n.element_id in selection and self._engine.is_compound(n.element_id)]

    # ── Observer pattern ─────────────────────────────────────────

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """
        Register a callback for a platform event.

        Events:
            - graph_synchronized
            - reload_failed
            - view_state_saved
        """
        self._listeners.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """Remove a previously registered callback."""
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def _notify(self, event: str, **kwargs: Any) -> None:
        """Fire all callbacks registered for the given event."""
        for cb in self._listeners.get(event, []):
            try:
                cb(**kwargs)
            except Exception as exc:
                logger.error("Observer callback failed for '%s': %s", event, exc)

    # ── Dunder ───────────────────────────────────────────────────

    def __repr__(self) -> str:
        return (
            f"GraphViewPlatform(workspace={self._workspace!r}, "
            f"data_sources={len(self._ds_loader)}, "
            f"generation={self._generation})"
        )
