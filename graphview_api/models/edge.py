"""
    Edge model - representation of an edge between nodes.
"""
from typing import Dict, Any, Mapping


class Edge:
    """
        Class for a directed edge between two nodes of a data set.

        Edges reference nodes by ID and do not own them.  They carry no
        identifier of their own: the synchronizer assigns a fresh one each
        time the edge is inserted into a live graph.
    """

    def __init__(self, source: Any, target: Any, label: str = ""):
        """
        Initialize an edge.

        Args:
            source: Source node ID (will be converted to str)
            target: Target node ID (will be converted to str)
            label: Display label
        """
        self.source = str(source)
        self.target = str(target)
        self.label = "" if label is None else str(label)

    def is_self_loop(self) -> bool:
        return self.source == self.target

    def __repr__(self) -> str:
        return f"Edge({self.source} -> {self.target}, label={self.label!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Edge):
            return False
        return (self.source, self.target, self.label) == (other.source, other.target, other.label)

    def __hash__(self) -> int:
        return hash((self.source, self.target, self.label))

    def to_dict(self) -> Dict[str, Any]:
        """Convert edge to the persisted layout ``{source, target, label}``."""
        return {
            'source': self.source,
            'target': self.target,
            'label': self.label,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Edge':
        """
        Build an edge from its persisted layout.

        Raises:
            TypeError: If ``data`` is not a mapping.
            KeyError:  If ``source`` or ``target`` is missing.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Edge must be an object, got {type(data).__name__}")
        return cls(data['source'], data['target'], data.get('label', ''))
