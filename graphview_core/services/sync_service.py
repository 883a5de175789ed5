"""
    GraphSynchronizer - rebuild a live graph from a data set.

    The rendering engine fixes an element's parent when the element is
    added, and silently drops a parent that is not present yet.  Nodes are
    therefore inserted in ascending depth of their parent chain (a stable
    sort, so equal depths keep input order), which puts every parent in
    the live graph before any of its children.

    Dangling references never fail a rebuild: a parent or edge endpoint
    missing from the data set is replaced by a placeholder node labelled
    with its own ID.

    The whole rebuild runs inside one batch, so the viewer sees a single
    redraw with the new graph and the restored view state.
"""
import logging
import uuid
from typing import Callable, Dict, List, Optional, Set

from graphview_api.models.dataset import DataSet
from graphview_api.models.element import Element
from graphview_api.models.node import Node
from graphview_api.models.view_state import ViewState
from graphview_api.plugins.base import RenderingEngine

from .exceptions import HierarchyCycleError, StructuralInconsistencyError, SynchronizationError
from .tree_service import build_forest, flatten
from .view_state_service import ViewStateStore

logger = logging.getLogger(__name__)


def _new_edge_id() -> str:
    return str(uuid.uuid4())


class GraphSynchronizer:
    """
    Turns a ``DataSet`` into the contents of a live graph.

    Args:
        strict_hierarchy: Raise ``HierarchyCycleError`` when parent
                          references form a cycle.  Otherwise the node
                          closing the cycle is inserted without a parent.
        id_factory:       Generates edge IDs (fresh UUID4 by default).
    """

    def __init__(self, strict_hierarchy: bool = False,
                 id_factory: Callable[[], str] = _new_edge_id):
        self._strict_hierarchy = strict_hierarchy
        self._id_factory = id_factory

    def synchronize(
        self,
        engine: RenderingEngine,
        dataset: DataSet,
        prior_view_state: Optional[ViewState] = None,
        just_loaded_view_state: Optional[ViewState] = None,
    ) -> None:
        """
        Replace the contents of ``engine`` with ``dataset`` and restore view state.

        Args:
            engine:                 Live graph to rebuild.
            dataset:                Data to show.
            prior_view_state:       Captured right before this call; wins
                                    over ``just_loaded_view_state``.
            just_loaded_view_state: Persisted state matching ``dataset``.

        Raises:
            HierarchyCycleError:  Strict mode only, before anything is touched.
            SynchronizationError: Anything failing during the rebuild.  The
                                  live graph is undefined afterwards.
        """
        ordered, cut_parents = self._order_nodes(dataset)
        view_store = ViewStateStore(engine)

        engine.start_batch()
        try:
            engine.remove_all()
            known: Set[str] = set(dataset.nodes.keys())
            placeholders: List[str] = []

            def ensure_node_exists(node_id: str) -> None:
                if node_id in known:
                    return
                known.add(node_id)
                placeholders.append(node_id)
                engine.add(Element.node(node_id, node_id))

            for node in ordered:
                parent = None if node.node_id in cut_parents else node.parent
                if parent is not None:
                    ensure_node_exists(parent)
                engine.add(Element(node.node_id, node.label, parent=parent,
                                   data=node.get_all_attributes()))

            for edge in dataset.edges:
                ensure_node_exists(edge.source)
                ensure_node_exists(edge.target)
                engine.add(Element.edge(self._id_factory(), edge.source, edge.target, edge.label))

            view_store.apply(ViewStateStore.merge(just_loaded_view_state, prior_view_state))
        except Exception as exc:
            raise SynchronizationError(f"Graph synchronization failed: {exc}") from exc
        finally:
            engine.end_batch()

        logger.info("Graph synchronized: %d nodes, %d edges, %d placeholder(s)",
                    len(ordered), len(dataset.edges), len(placeholders))
        if placeholders:
            logger.debug("Placeholders synthesized: %s", ", ".join(placeholders))

    # ── Ordering ─────────────────────────────────────────────────

    def _order_nodes(self, dataset: DataSet):
        """
        Return the nodes sorted by parent-chain depth, plus the IDs whose
        parent link was cut because it closed a cycle.
        """
        cut: List[str] = []
        roots = build_forest(
            dataset.nodes.values(),
            id_of=lambda n: n.node_id,
            parent_of=lambda n: n.parent,
            on_cycle=lambda n: cut.append(n.node_id),
        )

        if cut:
            if self._strict_hierarchy:
                raise HierarchyCycleError(cut)
            logger.warning("Parent cycle broken at %s; node(s) shown without parent",
                           ", ".join(cut))

        depth: Dict[str, int] = {t.item.node_id: t.depth for t in flatten(roots)}
        if len(depth) != len(dataset.nodes):
            raise StructuralInconsistencyError(
                f"{len(dataset.nodes) - len(depth)} node(s) unreachable from any root")

        ordered: List[Node] = sorted(dataset.nodes.values(), key=lambda n: depth[n.node_id])
        return ordered, set(cut)
