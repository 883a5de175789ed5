"""
    ViewStateStore - capture and reapply transient visual state.

    The store reads positions, camera, selection, collapsed groups and the
    lock flag from a live graph (``collect``) and writes them back
    (``apply``).  ``merge`` combines two captured states so that the state
    loaded from disk and the state captured right before a reload can both
    be restored.
"""
import logging
from typing import Optional

from graphview_api.models.view_state import ViewState
from graphview_api.plugins.base import RenderingEngine

logger = logging.getLogger(__name__)


class ViewStateStore:
    """
    Reads and writes the view state of one live graph.

    Applying a state that mentions unknown IDs is never an error: every
    entry without a counterpart in the live graph is skipped.
    """

    def __init__(self, engine: RenderingEngine):
        self._engine = engine

    @property
    def engine(self) -> RenderingEngine:
        return self._engine

    def collect(self) -> ViewState:
        """
        Capture the current view state.  Pure read.

        Camera and lock are only captured when the live graph holds
        elements; an empty viewport has nothing worth restoring.
        """
        engine = self._engine
        nodes = engine.nodes()
        positions = {n.element_id: engine.get_position(n.element_id) for n in nodes}
        collapsed = [n.element_id for n in nodes if engine.is_collapsed(n.element_id)]
        populated = bool(engine.elements())
        camera = engine.get_camera() if populated else None

        return ViewState.create(
            positions=positions,
            camera=camera,
            selected=engine.get_selection(),
            collapsed=collapsed,
            locked=engine.is_locked() if populated else None,
        )

    def apply(self, view_state: Optional[ViewState]) -> None:
        """Reapply ``view_state`` to the live graph, skipping unknown IDs."""
        if view_state is None:
            return
        engine = self._engine

        # Grouping first: expanding / collapsing may move children around
        for node in engine.nodes():
            node_id = node.element_id
            if not engine.is_compound(node_id):
                continue
            if node_id in view_state.collapsed:
                engine.collapse(node_id)
            else:
                engine.expand(node_id)

        skipped = 0
        for node_id, position in view_state.positions.items():
            element = engine.get_element(node_id)
            if element is None or element.is_edge:
                skipped += 1
                continue
            engine.set_position(node_id, position)

        if view_state.camera is not None:
            engine.set_camera(view_state.camera)

        engine.set_selection(s for s in view_state.selected if engine.has_element(s))

        if view_state.locked is not None:
            engine.set_locked(view_state.locked)

        if skipped:
            logger.debug("View state: %d position(s) without a live node skipped", skipped)

    @staticmethod
    def merge(base: Optional[ViewState], overlay: Optional[ViewState]) -> ViewState:
        """
        Combine two view states; ``overlay`` wins wherever it has a value.

        Positions are merged per node ID.  Collapsed-ness is decided per
        node: a node the overlay captured (it has a position there) is
        collapsed only if the overlay says so; base entries survive for
        nodes the overlay never saw.  An overlay captured from a populated
        graph (camera set) replaces the selection, otherwise the selections
        are joined.  Camera and lock come from the overlay when it captured
        them, otherwise from the base.
        """
        if base is None:
            return overlay if overlay is not None else ViewState()
        if overlay is None:
            return base

        positions = dict(base.positions)
        positions.update(overlay.positions)

        collapsed = {c for c in base.collapsed if c not in overlay.positions}
        collapsed |= overlay.collapsed

        if overlay.camera is not None:
            selected = overlay.selected
        else:
            selected = base.selected | overlay.selected

        return ViewState(
            positions=positions,
            camera=overlay.camera if overlay.camera is not None else base.camera,
            selected=frozenset(selected),
            collapsed=frozenset(collapsed),
            locked=overlay.locked if overlay.locked is not None else base.locked,
        )
