"""
    Tree utility - forest construction and traversal over a flat collection.

    Two construction modes:
        • parent-pointer   – each item names its parent ID.
        • children-accessor – each item lists its child items.

    Every ``TreeNode`` lives in an arena (a list shared by the whole forest).
    The back-reference to the parent is stored as an index into that arena,
    so a node never owns its parent and the forest stays cycle-safe.
"""
from typing import (Callable, Dict, Generic, Iterable, List, Optional,
                    Sequence, TypeVar)

T = TypeVar('T')

IdOf = Callable[[T], str]
ParentOf = Callable[[T], Optional[str]]
ChildrenOf = Callable[[T], Optional[Iterable[T]]]


class TreeNode(Generic[T]):
    """
    Wrapper around one item of the flat collection.

    Attributes:
        item:         The wrapped item.
        children:     Ordered child wrappers.
        depth:        Length of the ancestor chain (root = 0).
        index:        Position of this node in the forest arena.
        parent_index: Arena position of the parent, ``None`` for roots.
    """

    def __init__(self, item: T, arena: List['TreeNode[T]'], depth: int = -1):
        self.item = item
        self.children: List['TreeNode[T]'] = []
        self.depth = depth
        self.index = len(arena)
        self.parent_index: Optional[int] = None
        self._arena = arena
        arena.append(self)

    @property
    def parent(self) -> Optional['TreeNode[T]']:
        if self.parent_index is None:
            return None
        return self._arena[self.parent_index]

    @property
    def is_root(self) -> bool:
        return self.parent_index is None

    def __repr__(self) -> str:
        return f"TreeNode({self.item!r}, depth={self.depth}, children={len(self.children)})"


def build_forest(
    items: Iterable[T],
    id_of: IdOf,
    parent_of: Optional[ParentOf] = None,
    children_of: Optional[ChildrenOf] = None,
    on_cycle: Optional[Callable[[T], None]] = None,
) -> List[TreeNode[T]]:
    """
    Build a forest from a flat collection and return its roots.

    Args:
        items:       Flat collection.
        id_of:       item -> ID.
        parent_of:   item -> parent ID or ``None`` (parent-pointer mode).
        children_of: item -> child items or ``None`` (children-accessor mode).
        on_cycle:    Parent-pointer mode only.  Called with every item whose
                     parent link would close a cycle; that link is left out
                     and the item becomes a root.

    Raises:
        ValueError: Unless exactly one of ``parent_of`` / ``children_of`` is given.

    In children-accessor mode the caller guarantees there are no cycles.
    """
    if (parent_of is None) == (children_of is None):
        raise ValueError("Exactly one of 'parent_of' or 'children_of' must be given.")

    if parent_of is not None:
        return _build_by_parent(items, id_of, parent_of, on_cycle)
    return _build_by_children(items, id_of, children_of)


def _build_by_parent(items: Iterable[T], id_of: IdOf, parent_of: ParentOf,
                     on_cycle: Optional[Callable[[T], None]]) -> List[TreeNode[T]]:
    # Pass 1: one wrapper per ID (last item wins on duplicate IDs)
    by_id: Dict[str, T] = {}
    for item in items:
        by_id[id_of(item)] = item

    arena: List[TreeNode[T]] = []
    lookup: Dict[str, TreeNode[T]] = {key: TreeNode(item, arena) for key, item in by_id.items()}

    # Pass 2: wire parent / children links
    for node in arena:
        parent_id = parent_of(node.item)
        if parent_id is None:
            continue
        parent = lookup.get(parent_id)
        if parent is None:
            continue  # Unresolved parent -> root
        if parent is node or node in ancestors(parent):
            if on_cycle is not None:
                on_cycle(node.item)
            continue
        node.parent_index = parent.index
        parent.children.append(node)

    for node in arena:
        node.depth = len(ancestors(node))

    return [node for node in arena if node.is_root]


def _build_by_children(items: Iterable[T], id_of: IdOf,
                       children_of: ChildrenOf) -> List[TreeNode[T]]:
    item_list = list(items)
    inbound = {id_of(child) for item in item_list for child in (children_of(item) or ())}

    arena: List[TreeNode[T]] = []

    def expand(parent: TreeNode[T]) -> None:
        for child_item in children_of(parent.item) or ():
            child = TreeNode(child_item, arena, depth=parent.depth + 1)
            child.parent_index = parent.index
            parent.children.append(child)
            expand(child)

    roots: List[TreeNode[T]] = []
    for item in item_list:
        if id_of(item) in inbound:
            continue
        root = TreeNode(item, arena, depth=0)
        roots.append(root)
        expand(root)
    return roots


# ── Traversal ────────────────────────────────────────────────────

def ancestors(node: TreeNode[T]) -> List[TreeNode[T]]:
    """Ancestors ordered from the farthest (root) to the nearest (parent)."""
    chain: List[TreeNode[T]] = []
    parent = node.parent
    while parent is not None:
        chain.append(parent)
        parent = parent.parent
    chain.reverse()
    return chain


def descendants(node: TreeNode[T]) -> List[TreeNode[T]]:
    """All nodes below ``node`` in pre-order."""
    result: List[TreeNode[T]] = []
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        result.append(current)
        stack.extend(reversed(current.children))
    return result


def descendants_and_self(node: TreeNode[T]) -> List[TreeNode[T]]:
    return [node] + descendants(node)


def flatten(nodes: Sequence[TreeNode[T]]) -> List[TreeNode[T]]:
    """Descendants-and-self of every node, concatenated in input order."""
    result: List[TreeNode[T]] = []
    for node in nodes:
        result.extend(descendants_and_self(node))
    return result
