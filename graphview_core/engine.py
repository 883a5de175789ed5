"""
    InMemoryRenderingEngine - headless live graph.

    Implements the ``RenderingEngine`` contract without drawing anything.
    It enforces the same rules as a real engine (parents fixed at creation,
    missing parents silently detached, redraw deferred inside a batch) and
    records the order in which elements were inserted, which makes it the
    engine used by tests and by command-line sessions.
"""
import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Set

from graphview_api.models.element import Element
from graphview_api.models.view_state import Camera, Position
from graphview_api.plugins.base import RenderingEngine

logger = logging.getLogger(__name__)


class InMemoryRenderingEngine(RenderingEngine):

    def __init__(self):
        self._elements: Dict[str, Element] = {}
        self._positions: Dict[str, Position] = {}
        self._selection: Set[str] = set()
        self._collapsed: Set[str] = set()
        self._camera: Camera = Camera()
        self._locked: bool = False

        self._batch_depth: int = 0
        self._dirty: bool = False
        self._redraw_listeners: List[Callable[[], None]] = []

        self.insertion_log: List[str] = []
        self.redraw_count: int = 0

    # ── Elements ─────────────────────────────────────────────────

    def add(self, element: Element) -> Element:
        if element.element_id in self._elements:
            raise ValueError(f"Element with id {element.element_id} already exists")

        if element.is_edge:
            if element.source not in self._elements:
                raise ValueError(f"Source node {element.source} not in graph")
            if element.target not in self._elements:
                raise ValueError(f"Target node {element.target} not in graph")
        elif element.parent is not None:
            parent = self._elements.get(element.parent)
            if parent is None or parent.is_edge:
                logger.debug("Parent '%s' of '%s' not present; element detached",
                             element.parent, element.element_id)
                element = replace(element, parent=None)

        self._elements[element.element_id] = element
        if element.is_node:
            self._positions[element.element_id] = Position()
        self.insertion_log.append(element.element_id)
        self._mark_dirty()
        return element

    def remove_all(self) -> None:
        self._elements.clear()
        self._positions.clear()
        self._selection.clear()
        self._collapsed.clear()
        self._mark_dirty()

    def get_element(self, element_id: str) -> Optional[Element]:
        return self._elements.get(element_id)

    def elements(self) -> List[Element]:
        return list(self._elements.values())

    def is_hidden(self, node_id: str) -> bool:
        """Whether a node sits inside a collapsed ancestor."""
        element = self._elements.get(node_id)
        while element is not None and element.parent is not None:
            if element.parent in self._collapsed:
                return True
            element = self._elements.get(element.parent)
        return False

    # ── Batching ─────────────────────────────────────────────────

    @property
    def in_batch(self) -> bool:
        return self._batch_depth > 0

    def start_batch(self) -> None:
        self._batch_depth += 1

    def end_batch(self) -> None:
        if self._batch_depth == 0:
            raise RuntimeError("end_batch() called without a matching start_batch()")
        self._batch_depth -= 1
        if self._batch_depth == 0 and self._dirty:
            self._redraw()

    def on_redraw(self, callback: Callable[[], None]) -> None:
        self._redraw_listeners.append(callback)

    def _mark_dirty(self) -> None:
        if self._batch_depth > 0:
            self._dirty = True
        else:
            self._redraw()

    def _redraw(self) -> None:
        self._dirty = False
        self.redraw_count += 1
        for callback in self._redraw_listeners:
            callback()

    # ── Positions / camera ───────────────────────────────────────

    def get_position(self, node_id: str) -> Position:
        if node_id not in self._positions:
            raise KeyError(f"Node {node_id} not in graph")
        return self._positions[node_id]

    def set_position(self, node_id: str, position: Position) -> None:
        if node_id not in self._positions:
            raise KeyError(f"Node {node_id} not in graph")
        self._positions[node_id] = position
        self._mark_dirty()

    def get_camera(self) -> Camera:
        return self._camera

    def set_camera(self, camera: Camera) -> None:
        if camera.zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {camera.zoom}")
        self._camera = camera
        self._mark_dirty()

    # ── Selection ────────────────────────────────────────────────

    def get_selection(self) -> Set[str]:
        return set(self._selection)

    def set_selection(self, element_ids: Iterable[str]) -> None:
        self._selection = {eid for eid in element_ids if eid in self._elements}
        self._mark_dirty()

    # ── Expand / collapse ────────────────────────────────────────

    def collapse(self, node_id: str) -> None:
        if not self.is_compound(node_id):
            return
        self._collapsed.add(node_id)
        self._mark_dirty()

    def expand(self, node_id: str) -> None:
        if node_id in self._collapsed:
            self._collapsed.discard(node_id)
            self._mark_dirty()

    def is_collapsed(self, node_id: str) -> bool:
        return node_id in self._collapsed

    # ── Lock ─────────────────────────────────────────────────────

    def is_locked(self) -> bool:
        return self._locked

    def set_locked(self, locked: bool) -> None:
        self._locked = bool(locked)

    def __repr__(self) -> str:
        return (
            f"InMemoryRenderingEngine(nodes={len(self.nodes())}, "
            f"edges={len(self.edges())}, redraws={self.redraw_count})"
        )
