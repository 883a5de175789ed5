"""
    Workspace - the data source on screen and its view-state history.

    Design Pattern: Memento
    ───────────────────────
    Every view-changing command hands the view state it is about to
    replace to ``push_snapshot``; ``undo`` returns them newest first.
    The history is bounded, the oldest snapshot falls off the end.

    A completed reload replaces the live graph, so it also empties the
    history (``update``).
"""
import logging
import uuid
from collections import deque
from typing import Any, Deque, Dict, Mapping, Optional

from graphview_api.models.dataset import DataSet
from graphview_api.models.view_state import ViewState

logger = logging.getLogger(__name__)


class Workspace:
    """
    The loaded source descriptor, its data set and the undo history.

    Attributes:
        workspace_id: Unique identifier.
        name:         Display name.
        data_source:  Name of the adapter that produced ``dataset``.
        source:       The data source descriptor.
        dataset:      The data set currently shown.
    """

    def __init__(self, source: Optional[Mapping[str, Any]] = None,
                 dataset: Optional[DataSet] = None,
                 data_source: str = "",
                 name: Optional[str] = None,
                 max_history: int = 50):
        self.workspace_id = uuid.uuid4().hex
        self.name = name or f"Workspace-{self.workspace_id[:8]}"
        self.data_source = data_source
        self.source: Dict[str, Any] = dict(source or {})
        self.dataset: DataSet = dataset or DataSet.empty()
        self._snapshots: Deque[ViewState] = deque(maxlen=max_history)

    @property
    def source_type(self) -> Optional[str]:
        return self.source.get('type')

    @property
    def history_depth(self) -> int:
        return len(self._snapshots)

    def update(self, source: Mapping[str, Any], dataset: DataSet, data_source: str) -> None:
        """Record a completed reload and forget the history of the previous graph."""
        self.source = dict(source)
        self.dataset = dataset
        self.data_source = data_source
        if self._snapshots:
            logger.debug("Workspace %s: dropping %d snapshot(s) after reload",
                         self.name, len(self._snapshots))
        self._snapshots.clear()

    # ── History ──────────────────────────────────────────────────

    def push_snapshot(self, view_state: ViewState) -> None:
        self._snapshots.append(view_state)

    def undo(self) -> Optional[ViewState]:
        """Most recent snapshot, removed from the history; ``None`` when empty."""
        if not self._snapshots:
            logger.info("Workspace %s: history is empty", self.name)
            return None
        return self._snapshots.pop()

    def to_dict(self) -> Dict[str, Any]:
        """Metadata summary, the data set itself is not included."""
        return {
            'workspace_id': self.workspace_id,
            'name': self.name,
            'data_source': self.data_source,
            'source_type': self.source_type,
            'nodes': self.dataset.get_number_of_nodes(),
            'edges': self.dataset.get_number_of_edges(),
            'history_depth': self.history_depth,
        }

    def __repr__(self) -> str:
        return (f"Workspace({self.name!r}, source={self.data_source!r}, "
                f"nodes={self.dataset.get_number_of_nodes()}, history={self.history_depth})")
