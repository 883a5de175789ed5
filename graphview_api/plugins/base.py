"""
    Abstract base classes for plugins and collaborators.
    Defines the "Contract" that data sources and rendering engines must follow.
"""
import asyncio
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Set

from ..exceptions import DataSourceError
from ..models.dataset import DataSet
from ..models.element import Element
from ..models.view_state import Camera, Position


class DataSourcePlugin(ABC):
    """
        Abstract base class for Data Source plugins.
        Pattern: Strategy (for data loading).

        A data source is selected by ``match(source_type)`` and produces a
        fresh ``DataSet`` on every ``reload(source)``.
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the unique name of the plugin.
            Example: "JSON Parser"
        """
        pass

    @abstractmethod
    def match(self, source_type: Optional[str]) -> bool:
        """Whether this plugin handles descriptors of the given ``type``."""
        pass

    @abstractmethod
    async def reload(self, source: Mapping[str, Any]) -> DataSet:
        """
        Main method: obtain the data described by ``source``.

        Args:
            source: Source descriptor, e.g. ``{"type": "json", "path": "..."}``.

        Returns:
            DataSet: freshly built, never shared with a previous reload.

        Raises:
            DataSourceError: If the data cannot be obtained.
        """
        pass

    def attach(self, settings: Any) -> None:
        """
        Receive the platform's stored-settings accessor after discovery.
        Plugins that need connection settings override this.
        """
        return None


class FileDataSourcePlugin(DataSourcePlugin):
    """
        Base for plugins reading a text document.

        The descriptor either embeds the document (``contents``) or points
        to it (``path``).  Reading happens in a worker thread so the event
        loop driving the graph is never blocked.
    """

    #: Descriptor ``type`` values handled by the plugin.
    source_types: Set[str] = set()

    def match(self, source_type: Optional[str]) -> bool:
        return source_type in self.source_types

    @abstractmethod
    def parse_string(self, contents: str, source: Mapping[str, Any]) -> DataSet:
        """Turn the document text into a DataSet."""
        pass

    def parse(self, file_path: str) -> DataSet:
        """Synchronously parse a file into a DataSet."""
        return self.parse_string(self._read_file(file_path), {'path': file_path})

    async def reload(self, source: Mapping[str, Any]) -> DataSet:
        source_type = str(source.get('type', ''))
        if 'contents' in source:
            contents = source['contents']
        elif 'path' in source:
            try:
                contents = await asyncio.to_thread(self._read_file, source['path'])
            except OSError as exc:
                raise DataSourceError(
                    f"Cannot read '{source['path']}': {exc}", source_type) from exc
        else:
            raise DataSourceError(
                f"{self.get_plugin_name()}: descriptor needs 'path' or 'contents'.", source_type)

        try:
            return self.parse_string(contents, source)
        except DataSourceError:
            raise
        except (ValueError, TypeError, KeyError) as exc:
            raise DataSourceError(
                f"{self.get_plugin_name()}: invalid document: {exc}", source_type) from exc

    @staticmethod
    def _read_file(file_path: str) -> str:
        with open(file_path, "r", encoding="utf-8") as fh:
            return fh.read()


class RenderingEngine(ABC):
    """
        Abstract live graph as exposed by a rendering engine.

        Rules every implementation follows:
            • ``parent`` is fixed when an element is added.
            • Adding a node whose parent is absent silently detaches it.
            • Between ``start_batch`` and the matching ``end_batch`` the
              engine does not redraw.
    """

    # ── Elements ─────────────────────────────────────────────────

    @abstractmethod
    def add(self, element: Element) -> Element:
        """Insert an element and return the record actually stored."""
        pass

    @abstractmethod
    def remove_all(self) -> None:
        pass

    @abstractmethod
    def get_element(self, element_id: str) -> Optional[Element]:
        pass

    @abstractmethod
    def elements(self) -> List[Element]:
        """All elements in insertion order."""
        pass

    def has_element(self, element_id: str) -> bool:
        return self.get_element(element_id) is not None

    def nodes(self) -> List[Element]:
        return [e for e in self.elements() if e.is_node]

    def edges(self) -> List[Element]:
        return [e for e in self.elements() if e.is_edge]

    def children_of(self, element_id: str) -> List[Element]:
        return [e for e in self.nodes() if e.parent == element_id]

    def is_compound(self, element_id: str) -> bool:
        """A node with at least one child node."""
        return any(e.parent == element_id for e in self.nodes())

    # ── Batching ─────────────────────────────────────────────────

    @abstractmethod
    def start_batch(self) -> None:
        pass

    @abstractmethod
    def end_batch(self) -> None:
        pass

    @contextmanager
    def batch(self) -> Iterator['RenderingEngine']:
        """Suspend redraw for the duration of the block."""
        self.start_batch()
        try:
            yield self
        finally:
            self.end_batch()

    # ── Positions / camera ───────────────────────────────────────

    @abstractmethod
    def get_position(self, node_id: str) -> Position:
        pass

    @abstractmethod
    def set_position(self, node_id: str, position: Position) -> None:
        pass

    @abstractmethod
    def get_camera(self) -> Camera:
        pass

    @abstractmethod
    def set_camera(self, camera: Camera) -> None:
        pass

    # ── Selection ────────────────────────────────────────────────

    @abstractmethod
    def get_selection(self) -> Set[str]:
        pass

    @abstractmethod
    def set_selection(self, element_ids: Iterable[str]) -> None:
        """Replace the selection; IDs not in the live graph are skipped."""
        pass

    # ── Expand / collapse ────────────────────────────────────────

    @abstractmethod
    def collapse(self, node_id: str) -> None:
        pass

    @abstractmethod
    def expand(self, node_id: str) -> None:
        pass

    @abstractmethod
    def is_collapsed(self, node_id: str) -> bool:
        pass

    # ── Lock ─────────────────────────────────────────────────────

    @abstractmethod
    def is_locked(self) -> bool:
        pass

    @abstractmethod
    def set_locked(self, locked: bool) -> None:
        pass
