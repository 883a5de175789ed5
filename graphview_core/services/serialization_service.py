"""
    Serialization and deserialization of data sets and view states.

    Both documents are stored as JSON text:

        DataSet:   {"nodes": {id: {"label", "parent"?}},
                    "edges": [{"source", "target", "label"}]}
        ViewState: {"nodes": {id: {"x", "y"}}, "camera": {...},
                    "selected": [...], "collapsed": [...], "locked": bool}

    Design Pattern: Strategy (output formatting is configurable)
    ─────────────────────────────────────────────────────────────
    The ``SerializationConfig`` decides indentation and key ordering.
    Every failure to read a document is reported as ``DeserializationError``
    so callers have a single exception to recover from.
"""
import json
from typing import TYPE_CHECKING, Any, Dict, Generic, Optional, Type, TypeVar, Union

from graphview_api.models.dataset import DataSet
from graphview_api.models.view_state import ViewState

from .exceptions import DeserializationError

if TYPE_CHECKING:
    from ..graph_platform.config import SerializationConfig

TModel = TypeVar('TModel', DataSet, ViewState)


class _ModelSerializer(Generic[TModel]):
    """Shared JSON plumbing; subclasses name the model class."""

    model: Type[TModel]

    def __init__(self, config: Optional['SerializationConfig'] = None):
        self._config = config

    @property
    def config(self) -> Optional['SerializationConfig']:
        return self._config

    @config.setter
    def config(self, value: 'SerializationConfig') -> None:
        self._config = value

    # ── Serialization ────────────────────────────────────────────

    def serialize(self, obj: TModel) -> Dict[str, Any]:
        return obj.to_dict()

    def to_json(self, obj: TModel) -> str:
        indent = self._config.indent if self._config is not None else 2
        sort_keys = self._config.sort_keys if self._config is not None else False
        return json.dumps(self.serialize(obj), indent=indent, sort_keys=sort_keys,
                          ensure_ascii=False, default=str)

    # ── Deserialization ──────────────────────────────────────────

    def deserialize(self, data: Any) -> TModel:
        """
        Reconstruct the model from a dictionary (inverse of ``serialize``).

        Raises:
            DeserializationError: If ``data`` does not match the layout.
        """
        try:
            return self.model.from_dict(data)
        except (TypeError, KeyError, ValueError, AttributeError) as exc:
            raise DeserializationError(
                f"Invalid {self.model.__name__} document: {exc}") from exc

    def from_json(self, text: Union[str, bytes]) -> TModel:
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise DeserializationError(
                f"{self.model.__name__} document is not valid JSON: {exc}") from exc
        return self.deserialize(data)


class DataSetSerializer(_ModelSerializer[DataSet]):
    """
    Usage:
        serializer = DataSetSerializer()
        text = serializer.to_json(dataset)
        dataset = serializer.from_json(text)
    """
    model = DataSet


class ViewStateSerializer(_ModelSerializer[ViewState]):
    model = ViewState
