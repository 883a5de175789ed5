"""
    DataSet model - the unit produced by a data source adapter.

    A data set is a mapping from node ID to Node plus an ordered sequence
    of Edges.  It is built fresh on every reload and is read-only once
    constructed, so the synchronizer can iterate it without defensive copies.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .node import Node
from .edge import Edge


class DataSet:
    """
    Immutable node/edge collection.

    ``nodes`` keeps the insertion order of the input, which is the order
    the synchronizer falls back to for nodes of equal depth.
    """

    def __init__(self, nodes: Union[Mapping[str, Node], Iterable[Node], None] = None,
                 edges: Optional[Iterable[Edge]] = None):
        """
        Args:
            nodes: Either a mapping ``{node_id: Node}`` or an iterable of Nodes.
                   When an iterable repeats an ID, the last node wins.
            edges: Iterable of Edges (order is preserved).
        """
        collected: Dict[str, Node] = {}
        if isinstance(nodes, Mapping):
            for node_id, node in nodes.items():
                if str(node_id) != node.node_id:
                    raise ValueError(f"Key '{node_id}' does not match node id '{node.node_id}'")
                collected[node.node_id] = node
        elif nodes is not None:
            for node in nodes:
                collected[node.node_id] = node

        self._nodes: Mapping[str, Node] = MappingProxyType(collected)
        self._edges: Tuple[Edge, ...] = tuple(edges or ())

    @classmethod
    def empty(cls) -> 'DataSet':
        return cls()

    @property
    def nodes(self) -> Mapping[str, Node]:
        """Read-only mapping node_id -> Node."""
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_all_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def get_number_of_nodes(self) -> int:
        return len(self._nodes)

    def get_number_of_edges(self) -> int:
        return len(self._edges)

    def is_empty(self) -> bool:
        return not self._nodes and not self._edges

    def __repr__(self) -> str:
        return f"DataSet(nodes={len(self._nodes)}, edges={len(self._edges)})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, DataSet):
            return False
        return dict(self._nodes) == dict(other._nodes) and self._edges == other._edges

    def to_dict(self) -> Dict[str, Any]:
        """Persisted layout: ``{nodes: {id: {label, parent?}}, edges: [...]}``."""
        return {
            'nodes': {node_id: node.to_dict() for node_id, node in self._nodes.items()},
            'edges': [edge.to_dict() for edge in self._edges],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DataSet':
        """
        Inverse of ``to_dict``.  Missing sections are treated as empty.

        Raises:
            TypeError / KeyError: If the structure does not match the layout.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"DataSet must be an object, got {type(data).__name__}")
        raw_nodes = data.get('nodes') or {}
        raw_edges = data.get('edges') or []
        if not isinstance(raw_nodes, Mapping):
            raise TypeError("'nodes' must be an object keyed by node id")
        if not isinstance(raw_edges, list):
            raise TypeError("'edges' must be a list")
        nodes = [Node.from_dict(node_id, node_data) for node_id, node_data in raw_nodes.items()]
        edges = [Edge.from_dict(edge_data) for edge_data in raw_edges]
        return cls(nodes, edges)
