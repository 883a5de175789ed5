"""
    Element model - a record in the rendering engine's live graph.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Element:
    """
    A node or edge as held by the rendering engine.

    ``parent`` can only be given at creation time; the record is frozen so
    it cannot be reassigned afterwards.  Edges carry ``source`` and
    ``target``; nodes leave them ``None``.
    """
    element_id: str
    label: str = ""
    parent: Optional[str] = None
    source: Optional[str] = None
    target: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def node(cls, element_id: str, label: str, parent: Optional[str] = None,
             **data: Any) -> 'Element':
        return cls(element_id, label, parent=parent, data=data)

    @classmethod
    def edge(cls, element_id: str, source: str, target: str, label: str = "",
             **data: Any) -> 'Element':
        return cls(element_id, label, source=source, target=target, data=data)

    @property
    def is_edge(self) -> bool:
        return self.source is not None and self.target is not None

    @property
    def is_node(self) -> bool:
        return not self.is_edge

    def to_dict(self) -> Dict[str, Any]:
        """Element data as shown in the selection detail panel."""
        result: Dict[str, Any] = {'id': self.element_id, 'label': self.label}
        if self.parent is not None:
            result['parent'] = self.parent
        if self.is_edge:
            result['source'] = self.source
            result['target'] = self.target
        result.update(self.data)
        return result
