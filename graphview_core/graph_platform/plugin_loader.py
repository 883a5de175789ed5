"""
    Data source adapter registry, filled from entry points.

    Design Pattern: Registry
    ────────────────────────
    Adapters installed as packages advertise themselves under the
    ``graphview.data_source`` entry-point group (see setup.py).  Adapters
    can also be registered in code; those take precedence over an
    installed adapter with the same name and are consulted first when a
    source type is matched.

    Matching order:
        1. registered adapters, in registration order
        2. discovered adapters, sorted by entry-point name
"""
import importlib.metadata
import logging
from typing import Callable, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from graphview_api.plugins.base import DataSourcePlugin

logger = logging.getLogger(__name__)

TPlugin = TypeVar('TPlugin')

# Must match the group used in setup.py
DATA_SOURCE_EP_GROUP = 'graphview.data_source'


class PluginLoader(Generic[TPlugin]):
    """
    Ordered set of named plugin instances of one base class.

    Usage:
        loader = create_data_source_loader()
        name, plugin = loader.first(lambda p: p.match('json'))
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str, discover: bool = True):
        self._base_class = plugin_base_class
        self._group = group
        self._registered: Dict[str, TPlugin] = {}
        self._discover_enabled = discover
        self._discovered: Optional[Dict[str, TPlugin]] = None

    # ── Registration ─────────────────────────────────────────────

    def register(self, name: str, plugin: TPlugin) -> None:
        """Add ``plugin`` under ``name``, replacing any adapter of that name."""
        if not isinstance(plugin, self._base_class):
            raise TypeError(f"Plugin '{name}' is not a {self._base_class.__name__}")
        self._registered[name] = plugin

    def _discover(self) -> Dict[str, TPlugin]:
        if self._discovered is not None:
            return self._discovered
        if not self._discover_enabled:
            return {}

        found: Dict[str, TPlugin] = {}
        for ep in sorted(importlib.metadata.entry_points(group=self._group), key=lambda e: e.name):
            try:
                plugin_cls = ep.load()
            except (ImportError, AttributeError) as exc:
                logger.error("Failed to load plugin '%s': %s", ep.name, exc)
                continue
            if not (isinstance(plugin_cls, type) and issubclass(plugin_cls, self._base_class)):
                logger.warning("Plugin '%s' is not a %s, skipped",
                               ep.name, self._base_class.__name__)
                continue
            found[ep.name] = plugin_cls()
            logger.info("Loaded plugin: %s (%s)", ep.name, plugin_cls.__name__)

        self._discovered = found
        return found

    # ── Lookup ───────────────────────────────────────────────────

    def load_all(self) -> Dict[str, TPlugin]:
        """All adapters in matching order, keyed by name."""
        return dict(self)

    def __iter__(self) -> Iterator[Tuple[str, TPlugin]]:
        yield from self._registered.items()
        for name, plugin in self._discover().items():
            if name not in self._registered:
                yield name, plugin

    def items(self) -> List[Tuple[str, TPlugin]]:
        return list(self)

    def first(self, predicate: Callable[[TPlugin], bool]) -> Optional[Tuple[str, TPlugin]]:
        """The first ``(name, plugin)`` in matching order accepted by ``predicate``."""
        return next(((n, p) for n, p in self if predicate(p)), None)

    def get(self, name: str) -> Optional[TPlugin]:
        return self.load_all().get(name)

    def get_names(self) -> List[str]:
        return sorted(name for name, _ in self)

    def rediscover(self) -> None:
        """Drop discovered adapters so the next lookup scans entry points again."""
        self._discovered = None

    def __len__(self) -> int:
        return len(self.load_all())

    def __contains__(self, name: str) -> bool:
        return name in self.load_all()

    def __repr__(self) -> str:
        return (f"PluginLoader(base={self._base_class.__name__}, group='{self._group}', "
                f"registered={len(self._registered)})")


def create_data_source_loader(discover: bool = True) -> PluginLoader[DataSourcePlugin]:
    """Loader for data source adapters; ``discover=False`` skips entry points."""
    return PluginLoader(DataSourcePlugin, DATA_SOURCE_EP_GROUP, discover=discover)
