# tests/core_test/test_sync_service.py
"""
Tests for GraphSynchronizer: insertion order, placeholders, cycle policy,
batching, failure wrapping and view-state restoration.
"""
import itertools

import pytest

from graphview_api.models.dataset import DataSet
from graphview_api.models.edge import Edge
from graphview_api.models.element import Element
from graphview_api.models.node import Node
from graphview_api.models.view_state import Camera, Position, ViewState
from graphview_core.services.exceptions import (
    HierarchyCycleError,
    StructuralInconsistencyError,
    SynchronizationError,
)
from graphview_core.services.sync_service import GraphSynchronizer


@pytest.fixture
def synchronizer():
    counter = itertools.count(1)
    return GraphSynchronizer(id_factory=lambda: f"edge-{next(counter)}")


def _parents(engine):
    return {n.element_id: n.parent for n in engine.nodes()}


# ═════════════════════════════════════════════════════════════════
#  STRUCTURE
# ═════════════════════════════════════════════════════════════════

class TestStructure:

    def test_simple_parent_child(self, synchronizer, engine, simple_dataset):
        synchronizer.synchronize(engine, simple_dataset)
        assert len(engine.nodes()) == 2
        assert len(engine.edges()) == 1
        assert engine.get_element('B').parent == 'A'
        edge = engine.edges()[0]
        assert (edge.source, edge.target, edge.label) == ('A', 'B', 'e')

    def test_placeholder_for_unknown_endpoint(self, synchronizer, engine):
        dataset = DataSet.from_dict({
            'nodes': {'A': {'label': 'A'}},
            'edges': [{'source': 'A', 'target': 'Z', 'label': 'e'}],
        })
        synchronizer.synchronize(engine, dataset)
        z = engine.get_element('Z')
        assert z is not None
        assert z.label == 'Z'
        assert z.parent is None
        assert len(engine.edges()) == 1

    def test_placeholder_for_unknown_parent(self, synchronizer, engine):
        dataset = DataSet([Node('child', parent='missing')])
        synchronizer.synchronize(engine, dataset)
        assert engine.get_element('missing').label == 'missing'
        assert engine.get_element('child').parent == 'missing'

    def test_placeholder_created_once(self, synchronizer, engine):
        dataset = DataSet([Node('a')], [Edge('a', 'x'), Edge('x', 'a'), Edge('x', 'x')])
        synchronizer.synchronize(engine, dataset)
        assert [n.element_id for n in engine.nodes()] == ['a', 'x']
        assert len(engine.edges()) == 3

    def test_parents_inserted_before_children(self, synchronizer, engine, stub_dataset):
        synchronizer.synchronize(engine, stub_dataset)
        order = engine.insertion_log
        for node in stub_dataset.get_all_nodes():
            if node.parent is not None:
                assert order.index(node.parent) < order.index(node.node_id)

    def test_hierarchy_survives_reversed_input(self, synchronizer, engine, stub_dataset):
        synchronizer.synchronize(engine, stub_dataset)
        expected = {n.node_id: n.parent for n in stub_dataset.get_all_nodes()}
        expected['cache'] = None
        assert _parents(engine) == expected

    def test_no_dangling_edge_endpoints(self, synchronizer, engine, stub_dataset):
        synchronizer.synchronize(engine, stub_dataset)
        node_ids = {n.element_id for n in engine.nodes()}
        for edge in engine.edges():
            assert edge.source in node_ids
            assert edge.target in node_ids

    def test_equal_depth_keeps_input_order(self, synchronizer, engine):
        dataset = DataSet([Node('z'), Node('m'), Node('a')])
        synchronizer.synchronize(engine, dataset)
        assert engine.insertion_log == ['z', 'm', 'a']

    def test_node_attributes_carried_as_data(self, synchronizer, engine, stub_dataset):
        synchronizer.synchronize(engine, stub_dataset)
        assert engine.get_element('api').data == {'Kind': 'module', 'Lines': 2100}

    def test_fresh_edge_ids(self, engine, simple_dataset):
        sync = GraphSynchronizer()
        sync.synchronize(engine, simple_dataset)
        first = engine.edges()[0].element_id
        sync.synchronize(engine, simple_dataset)
        assert engine.edges()[0].element_id != first

    def test_previous_contents_removed(self, synchronizer, engine, simple_dataset):
        engine.add(Element.node('old', 'Old'))
        synchronizer.synchronize(engine, simple_dataset)
        assert not engine.has_element('old')

    def test_empty_dataset_clears_graph(self, synchronizer, engine, simple_dataset):
        synchronizer.synchronize(engine, simple_dataset)
        synchronizer.synchronize(engine, DataSet.empty())
        assert engine.elements() == []


# ═════════════════════════════════════════════════════════════════
#  CYCLES
# ═════════════════════════════════════════════════════════════════

class TestCyclePolicy:

    @pytest.fixture
    def cyclic(self):
        return DataSet([Node('a', parent='b'), Node('b', parent='a'), Node('c', parent='a')])

    def test_lenient_mode_breaks_cycle(self, synchronizer, engine, cyclic, caplog):
        synchronizer.synchronize(engine, cyclic)
        assert _parents(engine) == {'b': None, 'a': 'b', 'c': 'a'}
        assert "Parent cycle broken" in caplog.text

    def test_strict_mode_raises_before_mutation(self, engine, cyclic, simple_dataset):
        GraphSynchronizer().synchronize(engine, simple_dataset)
        before = engine.insertion_log[:]
        with pytest.raises(HierarchyCycleError) as info:
            GraphSynchronizer(strict_hierarchy=True).synchronize(engine, cyclic)
        assert info.value.node_ids == ['b']
        assert isinstance(info.value, StructuralInconsistencyError)
        assert engine.insertion_log == before
        assert not engine.in_batch


# ═════════════════════════════════════════════════════════════════
#  BATCHING / FAILURE
# ═════════════════════════════════════════════════════════════════

class TestBatching:

    def test_single_redraw(self, synchronizer, engine, stub_dataset):
        before = engine.redraw_count
        synchronizer.synchronize(engine, stub_dataset)
        assert engine.redraw_count == before + 1

    def test_failure_is_wrapped_and_batch_closed(self, engine, simple_dataset):
        sync = GraphSynchronizer(id_factory=lambda: 'A')  # collides with node A
        with pytest.raises(SynchronizationError) as info:
            sync.synchronize(engine, simple_dataset)
        assert isinstance(info.value.__cause__, ValueError)
        assert not engine.in_batch


# ═════════════════════════════════════════════════════════════════
#  VIEW STATE
# ═════════════════════════════════════════════════════════════════

class TestViewStateRestoration:

    def test_prior_state_survives_reload(self, synchronizer, engine, simple_dataset):
        synchronizer.synchronize(engine, simple_dataset)
        engine.set_position('A', Position(40, 60))
        engine.set_selection(['B'])
        prior = ViewState.create(positions={'A': Position(40, 60)}, selected={'B'})
        synchronizer.synchronize(engine, simple_dataset, prior_view_state=prior)
        assert engine.get_position('A') == Position(40, 60)
        assert engine.get_selection() == {'B'}

    def test_prior_wins_over_just_loaded(self, synchronizer, engine, simple_dataset):
        loaded = ViewState.create(positions={'A': Position(1, 1), 'B': Position(2, 2)},
                                  camera=Camera(Position(0, 0), 2.0))
        prior = ViewState.create(positions={'A': Position(9, 9)})
        synchronizer.synchronize(engine, simple_dataset, prior, loaded)
        assert engine.get_position('A') == Position(9, 9)
        assert engine.get_position('B') == Position(2, 2)
        assert engine.get_camera().zoom == 2.0

    def test_just_loaded_alone(self, synchronizer, engine, simple_dataset):
        loaded = ViewState.create(collapsed={'A'}, locked=True)
        synchronizer.synchronize(engine, simple_dataset, just_loaded_view_state=loaded)
        assert engine.is_collapsed('A')
        assert engine.is_locked()

    def test_state_for_removed_nodes_is_ignored(self, synchronizer, engine, simple_dataset):
        prior = ViewState.create(positions={'gone': Position(5, 5)}, selected={'gone'})
        synchronizer.synchronize(engine, simple_dataset, prior)
        assert engine.get_selection() == set()
        assert not engine.has_element('gone')
