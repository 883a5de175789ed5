"""
    ViewState model - transient visual attributes of a live graph.

    Positions, camera, selection, collapsed groups and the lock flag are
    kept apart from the data set so they survive a reload of the data.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Position':
        if not isinstance(data, Mapping):
            raise TypeError(f"Position must be an object, got {type(data).__name__}")
        return cls(float(data['x']), float(data['y']))


@dataclass(frozen=True)
class Camera:
    """Pan offset and zoom factor of the viewport."""
    pan: Position = field(default_factory=Position)
    zoom: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {'pan': self.pan.to_dict(), 'zoom': self.zoom}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Camera':
        if not isinstance(data, Mapping):
            raise TypeError(f"Camera must be an object, got {type(data).__name__}")
        zoom = float(data.get('zoom', 1.0))
        if zoom <= 0:
            raise ValueError(f"Camera zoom must be positive, got {zoom}")
        return cls(Position.from_dict(data.get('pan', {'x': 0, 'y': 0})), zoom)


@dataclass(frozen=True)
class ViewState:
    """
    Snapshot of the visual state of a live graph.

    Attributes:
        positions:  node_id -> Position.
        camera:     Viewport pan / zoom, ``None`` when not captured.
        selected:   IDs of selected elements (nodes and edges).
        collapsed:  IDs of compound nodes shown collapsed.
        locked:     Whether node positions are locked, ``None`` when not captured.
    """
    positions: Dict[str, Position] = field(default_factory=dict)
    camera: Optional[Camera] = None
    selected: FrozenSet[str] = frozenset()
    collapsed: FrozenSet[str] = frozenset()
    locked: Optional[bool] = None

    @classmethod
    def create(cls, positions: Optional[Mapping[str, Position]] = None,
               camera: Optional[Camera] = None,
               selected: Iterable[str] = (),
               collapsed: Iterable[str] = (),
               locked: Optional[bool] = None) -> 'ViewState':
        """Convenience factory accepting any iterables for the ID sets."""
        return cls(
            positions=dict(positions or {}),
            camera=camera,
            selected=frozenset(selected),
            collapsed=frozenset(collapsed),
            locked=locked,
        )

    def is_empty(self) -> bool:
        return (not self.positions and self.camera is None and not self.selected
                and not self.collapsed and self.locked is None)

    def to_dict(self) -> Dict[str, Any]:
        """
        Persisted layout::

            {"nodes": {id: {"x", "y"}}, "camera": {"pan": {"x", "y"}, "zoom"},
             "selected": [...], "collapsed": [...], "locked": bool}

        ``camera`` and ``locked`` are omitted when not captured.
        """
        result: Dict[str, Any] = {
            'nodes': {node_id: pos.to_dict() for node_id, pos in self.positions.items()},
            'selected': sorted(self.selected),
            'collapsed': sorted(self.collapsed),
        }
        if self.camera is not None:
            result['camera'] = self.camera.to_dict()
        if self.locked is not None:
            result['locked'] = self.locked
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ViewState':
        """
        Inverse of ``to_dict``.

        Raises:
            TypeError / KeyError / ValueError: If the structure does not match.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"ViewState must be an object, got {type(data).__name__}")

        raw_nodes = data.get('nodes') or {}
        if not isinstance(raw_nodes, Mapping):
            raise TypeError("'nodes' must be an object keyed by node id")
        positions = {str(k): Position.from_dict(v) for k, v in raw_nodes.items()}

        raw_camera = data.get('camera')
        camera = Camera.from_dict(raw_camera) if raw_camera is not None else None

        selected = data.get('selected') or []
        collapsed = data.get('collapsed') or []
        if not isinstance(selected, list) or not isinstance(collapsed, list):
            raise TypeError("'selected' and 'collapsed' must be lists")

        locked = data.get('locked')
        if locked is not None and not isinstance(locked, bool):
            raise TypeError("'locked' must be a boolean")

        return cls.create(
            positions=positions,
            camera=camera,
            selected=(str(s) for s in selected),
            collapsed=(str(c) for c in collapsed),
            locked=locked,
        )
