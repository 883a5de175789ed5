# tests/core_test/test_view_state_service.py
"""
Tests for ViewStateStore: collect, apply, merge.
"""
import pytest

from graphview_api.models.element import Element
from graphview_api.models.view_state import Camera, Position, ViewState
from graphview_core.services.view_state_service import ViewStateStore


@pytest.fixture
def populated(engine):
    """Live graph: group g with children a and b, a standalone node c, edge a → c."""
    engine.add(Element.node('g', 'Group'))
    engine.add(Element.node('a', 'A', parent='g'))
    engine.add(Element.node('b', 'B', parent='g'))
    engine.add(Element.node('c', 'C'))
    engine.add(Element.edge('e1', 'a', 'c'))
    return engine


@pytest.fixture
def store(populated):
    return ViewStateStore(populated)


# ═════════════════════════════════════════════════════════════════
#  COLLECT
# ═════════════════════════════════════════════════════════════════

class TestCollect:

    def test_collects_all_node_positions(self, store, populated):
        populated.set_position('a', Position(3, 4))
        vs = store.collect()
        assert set(vs.positions) == {'g', 'a', 'b', 'c'}
        assert vs.positions['a'] == Position(3, 4)

    def test_collects_selection_collapsed_lock_camera(self, store, populated):
        populated.set_selection(['a', 'e1'])
        populated.collapse('g')
        populated.set_locked(True)
        populated.set_camera(Camera(Position(1, 2), 2.0))
        vs = store.collect()
        assert vs.selected == frozenset({'a', 'e1'})
        assert vs.collapsed == frozenset({'g'})
        assert vs.locked is True
        assert vs.camera == Camera(Position(1, 2), 2.0)

    def test_empty_engine_has_no_camera_or_lock(self, engine):
        vs = ViewStateStore(engine).collect()
        assert vs.camera is None
        assert vs.locked is None
        assert vs.positions == {}

    def test_collect_is_pure(self, store, populated):
        before = populated.redraw_count
        store.collect()
        assert populated.redraw_count == before


# ═════════════════════════════════════════════════════════════════
#  APPLY
# ═════════════════════════════════════════════════════════════════

class TestApply:

    def test_apply_restores_everything(self, store, populated):
        vs = ViewState.create(
            positions={'a': Position(10, 10), 'c': Position(-1, 0)},
            camera=Camera(Position(5, 5), 0.5),
            selected={'c'},
            collapsed={'g'},
            locked=True,
        )
        store.apply(vs)
        assert populated.get_position('a') == Position(10, 10)
        assert populated.get_position('c') == Position(-1, 0)
        assert populated.get_camera() == Camera(Position(5, 5), 0.5)
        assert populated.get_selection() == {'c'}
        assert populated.is_collapsed('g')
        assert populated.is_locked()

    def test_unknown_ids_are_skipped(self, store, populated):
        vs = ViewState.create(
            positions={'ghost': Position(1, 1), 'a': Position(2, 2)},
            selected={'ghost', 'a'},
            collapsed={'ghost'},
        )
        store.apply(vs)
        assert populated.get_position('a') == Position(2, 2)
        assert populated.get_selection() == {'a'}

    def test_edge_position_entry_is_skipped(self, store, populated):
        store.apply(ViewState.create(positions={'e1': Position(9, 9)}))
        assert 'e1' not in store.collect().positions

    def test_apply_none_is_noop(self, store, populated):
        before = store.collect()
        store.apply(None)
        assert store.collect() == before

    def test_missing_camera_and_lock_keep_current(self, store, populated):
        populated.set_camera(Camera(Position(7, 7), 3.0))
        populated.set_locked(True)
        store.apply(ViewState.create(positions={'a': Position(1, 1)}))
        assert populated.get_camera() == Camera(Position(7, 7), 3.0)
        assert populated.is_locked()

    def test_apply_expands_groups_not_listed(self, store, populated):
        populated.collapse('g')
        store.apply(ViewState.create(collapsed=()))
        assert not populated.is_collapsed('g')

    def test_collect_apply_collect_is_idempotent(self, store, populated):
        populated.set_position('b', Position(8, -3))
        populated.set_selection(['b'])
        populated.collapse('g')
        populated.set_camera(Camera(Position(2, 2), 1.25))
        first = store.collect()
        store.apply(first)
        assert store.collect() == first


# ═════════════════════════════════════════════════════════════════
#  MERGE
# ═════════════════════════════════════════════════════════════════

class TestMerge:

    def test_empty_overlay_reduces_to_base(self, sample_view_state):
        assert ViewStateStore.merge(sample_view_state, ViewState()) == sample_view_state

    def test_full_overlay_equals_overlay(self, sample_view_state):
        overlay = ViewState.create(
            positions={'ui': Position(0, 0), 'api': Position(1, 1)},
            camera=Camera(Position(0, 0), 2.0),
            selected=sample_view_state.selected,
            collapsed=sample_view_state.collapsed,
            locked=False,
        )
        assert ViewStateStore.merge(sample_view_state, overlay) == overlay

    def test_overlay_wins_per_position(self):
        base = ViewState.create(positions={'a': Position(1, 1), 'b': Position(2, 2)})
        overlay = ViewState.create(positions={'b': Position(9, 9)})
        merged = ViewStateStore.merge(base, overlay)
        assert merged.positions == {'a': Position(1, 1), 'b': Position(9, 9)}

    def test_selection_and_collapsed_are_unions(self):
        base = ViewState.create(selected={'a'}, collapsed={'g1'})
        overlay = ViewState.create(selected={'b'}, collapsed={'g2'})
        merged = ViewStateStore.merge(base, overlay)
        assert merged.selected == frozenset({'a', 'b'})
        assert merged.collapsed == frozenset({'g1', 'g2'})

    def test_overlay_decides_collapse_for_nodes_it_captured(self):
        base = ViewState.create(collapsed={'g1', 'g2'})
        overlay = ViewState.create(positions={'g1': Position(0, 0)}, collapsed=())
        assert ViewStateStore.merge(base, overlay).collapsed == frozenset({'g2'})

    def test_populated_overlay_replaces_selection(self):
        base = ViewState.create(selected={'a', 'b'})
        overlay = ViewState.create(positions={'a': Position(0, 0)},
                                   camera=Camera(Position(0, 0), 1.0))
        assert ViewStateStore.merge(base, overlay).selected == frozenset()

    def test_camera_falls_back_to_base(self, sample_view_state):
        merged = ViewStateStore.merge(sample_view_state, ViewState.create(locked=False))
        assert merged.camera == sample_view_state.camera
        assert merged.locked is False

    def test_none_arguments(self, sample_view_state):
        assert ViewStateStore.merge(None, sample_view_state) == sample_view_state
        assert ViewStateStore.merge(sample_view_state, None) == sample_view_state
        assert ViewStateStore.merge(None, None) == ViewState()
