"""
    Node model - representation of a node in a data set.
"""
from typing import Dict, Any, Mapping, Optional


class Node:
    """
    A node as produced by a data source adapter.

    Each node has an ID, a display label, an optional parent reference
    (another node ID in the same data set) and arbitrary attributes that
    are carried into the live element for inspection.
    """

    def __init__(self, node_id: Any, label: Optional[str] = None,
                 parent: Optional[Any] = None, **attributes):
        """
        Initialize a node.

        Args:
            node_id: Unique identifier of the node (will be converted to str)
            label: Display label (defaults to the ID)
            parent: ID of the parent node, if any (will be converted to str)
            **attributes: Arbitrary node attributes
        """
        # Ensure IDs are always strings for consistency in comparisons
        self.node_id = str(node_id)
        self.label = str(label) if label is not None else self.node_id
        self.parent = str(parent) if parent not in (None, "") else None
        self.attributes: Dict[str, Any] = dict(attributes)

    def get_attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def get_all_attributes(self) -> Dict[str, Any]:
        return self.attributes.copy()

    def has_parent(self) -> bool:
        return self.parent is not None

    def __repr__(self) -> str:
        if self.parent is None:
            return f"Node({self.node_id}, label={self.label!r})"
        return f"Node({self.node_id}, label={self.label!r}, parent={self.parent})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Node):
            return False
        return (self.node_id == other.node_id
                and self.label == other.label
                and self.parent == other.parent)

    def __hash__(self) -> int:
        """Hash node by ID"""
        return hash(self.node_id)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert node to the persisted layout ``{label, parent?}``.
        The ID is the key of the enclosing mapping.
        """
        result: Dict[str, Any] = {'label': self.label}
        if self.parent is not None:
            result['parent'] = self.parent
        return result

    @classmethod
    def from_dict(cls, node_id: Any, data: Mapping[str, Any]) -> 'Node':
        """
        Build a node from its persisted layout.

        Raises:
            TypeError: If ``data`` is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Node '{node_id}' must be an object, got {type(data).__name__}")
        extra = {k: v for k, v in data.items() if k not in ('node_id', 'label', 'parent')}
        return cls(node_id, label=data.get('label'), parent=data.get('parent'), **extra)
