# tests/core_test/test_models.py
"""
Tests for the data model (Node, Edge, DataSet, ViewState, Element) and
the JSON serializers.
"""
import json

import pytest

from graphview_api.models.dataset import DataSet
from graphview_api.models.edge import Edge
from graphview_api.models.element import Element
from graphview_api.models.node import Node
from graphview_api.models.view_state import Camera, Position, ViewState
from graphview_core.graph_platform.config import SerializationConfig
from graphview_core.services.exceptions import DeserializationError
from graphview_core.services.serialization_service import DataSetSerializer, ViewStateSerializer


# ═════════════════════════════════════════════════════════════════
#  NODE / EDGE
# ═════════════════════════════════════════════════════════════════

class TestNode:

    def test_ids_are_strings(self):
        node = Node(42, parent=7)
        assert node.node_id == '42'
        assert node.parent == '7'

    def test_label_defaults_to_id(self):
        assert Node('x').label == 'x'

    def test_empty_parent_is_none(self):
        assert Node('x', parent='').parent is None
        assert not Node('x', parent='').has_parent()

    def test_attributes(self):
        node = Node('x', Kind='module')
        assert node.get_attribute('Kind') == 'module'
        assert node.get_attribute('missing') is None
        copy = node.get_all_attributes()
        copy['Kind'] = 'changed'
        assert node.get_attribute('Kind') == 'module'

    def test_from_dict_keeps_extra_keys(self):
        node = Node.from_dict('a', {'label': 'A', 'parent': 'p', 'color': 'red'})
        assert (node.label, node.parent, node.get_attribute('color')) == ('A', 'p', 'red')

    def test_from_dict_ignores_node_id_key(self):
        node = Node.from_dict('a', {'label': 'A', 'node_id': 'other', 'size': 2})
        assert node.node_id == 'a'
        assert node.get_attribute('size') == 2
        assert node.get_attribute('node_id') is None

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            Node.from_dict('a', ['label'])

    def test_to_dict_omits_missing_parent(self):
        assert Node('a', 'A').to_dict() == {'label': 'A'}


class TestEdge:

    def test_equality(self):
        assert Edge('a', 'b', 'x') == Edge('a', 'b', 'x')
        assert Edge('a', 'b', 'x') != Edge('a', 'b', 'y')

    def test_self_loop(self):
        assert Edge('a', 'a').is_self_loop()

    def test_from_dict_requires_endpoints(self):
        with pytest.raises(KeyError):
            Edge.from_dict({'source': 'a'})


# ═════════════════════════════════════════════════════════════════
#  DATASET
# ═════════════════════════════════════════════════════════════════

class TestDataSet:

    def test_nodes_are_read_only(self, stub_dataset):
        with pytest.raises(TypeError):
            stub_dataset.nodes['new'] = Node('new')

    def test_counts(self, stub_dataset):
        assert stub_dataset.get_number_of_nodes() == 8
        assert stub_dataset.get_number_of_edges() == 5

    def test_mapping_key_must_match_id(self):
        with pytest.raises(ValueError):
            DataSet({'a': Node('b')})

    def test_last_duplicate_wins(self):
        dataset = DataSet([Node('a', 'first'), Node('a', 'second')])
        assert dataset.get_node('a').label == 'second'

    def test_empty(self):
        assert DataSet.empty().is_empty()

    def test_from_dict_missing_sections(self):
        assert DataSet.from_dict({}).is_empty()

    def test_from_dict_rejects_bad_structure(self):
        with pytest.raises(TypeError):
            DataSet.from_dict({'nodes': ['a'], 'edges': []})
        with pytest.raises(TypeError):
            DataSet.from_dict({'edges': {'a': 'b'}})


# ═════════════════════════════════════════════════════════════════
#  VIEW STATE / ELEMENT
# ═════════════════════════════════════════════════════════════════

class TestViewStateModel:

    def test_persisted_layout(self, sample_view_state):
        data = sample_view_state.to_dict()
        assert data['nodes']['ui'] == {'x': 10, 'y': 20}
        assert data['selected'] == ['api']
        assert data['collapsed'] == ['frontend']
        assert data['camera'] == {'pan': {'x': 100, 'y': 50}, 'zoom': 1.5}
        assert data['locked'] is True

    def test_node_named_like_a_key_does_not_collide(self):
        vs = ViewState.create(positions={'selected': Position(1, 2)})
        assert ViewState.from_dict(vs.to_dict()).positions == {'selected': Position(1, 2)}

    def test_uncaptured_fields_are_omitted(self):
        data = ViewState().to_dict()
        assert 'camera' not in data
        assert 'locked' not in data

    def test_from_dict_rejects_non_positive_zoom(self):
        with pytest.raises(ValueError):
            ViewState.from_dict({'camera': {'pan': {'x': 0, 'y': 0}, 'zoom': 0}})

    def test_from_dict_rejects_non_bool_lock(self):
        with pytest.raises(TypeError):
            ViewState.from_dict({'locked': 'yes'})

    def test_is_empty(self, sample_view_state):
        assert ViewState().is_empty()
        assert not sample_view_state.is_empty()


class TestElement:

    def test_node_and_edge(self):
        node = Element.node('a', 'A', parent='p', color='red')
        edge = Element.edge('e', 'a', 'b', 'rel')
        assert node.is_node and not node.is_edge
        assert edge.is_edge
        assert node.to_dict() == {'id': 'a', 'label': 'A', 'parent': 'p', 'color': 'red'}
        assert edge.to_dict() == {'id': 'e', 'label': 'rel', 'source': 'a', 'target': 'b'}

    def test_frozen(self):
        node = Element.node('a', 'A')
        with pytest.raises(AttributeError):
            node.parent = 'p'


# ═════════════════════════════════════════════════════════════════
#  SERIALIZERS
# ═════════════════════════════════════════════════════════════════

class TestSerializers:

    def test_dataset_json_layout(self, simple_dataset):
        data = json.loads(DataSetSerializer().to_json(simple_dataset))
        assert data == {
            'nodes': {'A': {'label': 'A'}, 'B': {'label': 'B', 'parent': 'A'}},
            'edges': [{'source': 'A', 'target': 'B', 'label': 'e'}],
        }

    def test_view_state_survives_json(self, sample_view_state):
        serializer = ViewStateSerializer()
        assert serializer.from_json(serializer.to_json(sample_view_state)) == sample_view_state

    def test_config_controls_formatting(self, simple_dataset):
        compact = DataSetSerializer(SerializationConfig(indent=None, sort_keys=True))
        assert '\n' not in compact.to_json(simple_dataset)

    def test_invalid_json_raises_deserialization_error(self):
        with pytest.raises(DeserializationError):
            ViewStateSerializer().from_json('{broken')

    def test_invalid_structure_raises_deserialization_error(self):
        with pytest.raises(DeserializationError):
            DataSetSerializer().from_json('{"nodes": {"a": 5}}')

    def test_deserialization_error_is_value_error(self):
        with pytest.raises(ValueError):
            ViewStateSerializer().deserialize({'nodes': {'a': {'x': 1}}})
