"""
    CLI Commands - concrete command implementations.

    Design Pattern: Command
    ───────────────────────
    Each command encapsulates a view action on the live graph as an object
    with ``execute(platform) → CommandResult``.  Commands that change the
    view state declare ``changes_view``; the ``CommandProcessor`` then
    snapshots the view state beforehand so ``undo`` can restore it.

    Supported commands:
    ───────────────────
        select <id> [<id> ...]
        select-all
        move <node_id> <x> <y>
        zoom <factor>
        pan <x> <y>
        lock | unlock
        expand | collapse | toggle [<id> ...]
        info [<id>]
        list [nodes|edges]
        save
        reload
        undo
        help
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from graphview_api.models.view_state import Camera, Position

if TYPE_CHECKING:
    from graphview_core.graph_platform.core import GraphViewPlatform


# ── Result wrapper ───────────────────────────────────────────────

@dataclass
class CommandResult:
    """
    Value object returned by every command execution.

    Attributes:
        success:  Whether the command completed without error.
        message:  Human-readable output.
        data:     Optional structured data for programmatic consumers.
    """
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = field(default_factory=dict)


# ── Abstract base ────────────────────────────────────────────────

class Command(ABC):
    """
    Abstract base for all CLI commands.

    Design Pattern: Command
    """

    @abstractmethod
    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        """Execute the command against the platform's live graph."""
        ...

    @property
    def changes_view(self) -> bool:
        """Whether the command alters the view state (and can be undone)."""
        return False


# ═════════════════════════════════════════════════════════════════
#  SELECTION
# ═════════════════════════════════════════════════════════════════

class SelectCommand(Command):
    """
    Replace the selection.

    Syntax:
        select <id> [<id> ...]
    """

    def __init__(self, element_ids: Sequence[str]):
        self._element_ids = [str(e) for e in element_ids]

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        engine = platform.engine
        unknown = [e for e in self._element_ids if not engine.has_element(e)]
        if unknown:
            return CommandResult(False, f"Unknown element(s): {unknown}.")
        engine.set_selection(self._element_ids)
        return CommandResult(True, f"{len(self._element_ids)} element(s) selected.")

    @property
    def changes_view(self) -> bool:
        return True


class SelectAllCommand(Command):
    """
    Select every node.

    Syntax:
        select-all
    """

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        platform.select_all()
        return CommandResult(True, f"{len(platform.engine.get_selection())} node(s) selected.")

    @property
    def changes_view(self) -> bool:
        return True


# ═════════════════════════════════════════════════════════════════
#  POSITIONS / CAMERA
# ═════════════════════════════════════════════════════════════════

class MoveCommand(Command):
    """
    Move a node.  Refused while nodes are locked.

    Syntax:
        move <node_id> <x> <y>
    """

    def __init__(self, node_id: str, x: float, y: float):
        self._node_id = str(node_id)
        self._position = Position(x, y)

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        engine = platform.engine
        if engine.is_locked():
            return CommandResult(False, "Nodes are locked. Use 'unlock' first.")
        element = engine.get_element(self._node_id)
        if element is None or element.is_edge:
            return CommandResult(False, f"Node '{self._node_id}' not found.")
        engine.set_position(self._node_id, self._position)
        return CommandResult(
            True,
            f"Node '{self._node_id}' moved to ({self._position.x:g}, {self._position.y:g}).",
        )

    @property
    def changes_view(self) -> bool:
        return True


class ZoomCommand(Command):
    """
    Set the zoom factor.

    Syntax:
        zoom <factor>
    """

    def __init__(self, zoom: float):
        self._zoom = zoom

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        engine = platform.engine
        try:
            engine.set_camera(Camera(engine.get_camera().pan, self._zoom))
        except ValueError as e:
            return CommandResult(False, f"Zoom error: {e}")
        return CommandResult(True, f"Zoom set to {self._zoom:g}.")

    @property
    def changes_view(self) -> bool:
        return True


class PanCommand(Command):
    """
    Set the pan offset.

    Syntax:
        pan <x> <y>
    """

    def __init__(self, x: float, y: float):
        self._pan = Position(x, y)

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        engine = platform.engine
        engine.set_camera(Camera(self._pan, engine.get_camera().zoom))
        return CommandResult(True, f"Pan set to ({self._pan.x:g}, {self._pan.y:g}).")

    @property
    def changes_view(self) -> bool:
        return True


class LockCommand(Command):
    """
    Lock or unlock node positions.

    Syntax:
        lock
        unlock
    """

    def __init__(self, locked: bool):
        self._locked = locked

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        platform.set_nodes_locked(self._locked)
        return CommandResult(True, "Nodes locked." if self._locked else "Nodes unlocked.")

    @property
    def changes_view(self) -> bool:
        return True


# ═════════════════════════════════════════════════════════════════
#  EXPAND / COLLAPSE
# ═════════════════════════════════════════════════════════════════

class ExpandCollapseCommand(Command):
    """
    Expand, collapse or toggle compound nodes.  Acts on the selection;
    explicit ids replace the selection first.

    Syntax:
        expand   [<id> ...]
        collapse [<id> ...]
        toggle   [<id> ...]
    """

    MODES = ("expand", "collapse", "toggle")

    def __init__(self, mode: str, element_ids: Sequence[str] = ()):
        if mode not in self.MODES:
            raise ValueError(f"Unknown mode: '{mode}'.")
        self._mode = mode
        self._element_ids = [str(e) for e in element_ids]

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        if self._element_ids:
            unknown = [e for e in self._element_ids if not platform.engine.has_element(e)]
            if unknown:
                return CommandResult(False, f"Unknown element(s): {unknown}.")
            platform.engine.set_selection(self._element_ids)

        if self._mode == "expand":
            changed = platform.expand_selections()
        elif self._mode == "collapse":
            changed = platform.collapse_selections()
        else:
            changed = platform.toggle_expand_collapse()

        if not changed:
            return CommandResult(False, "No compound node selected.")
        return CommandResult(True, f"{self._mode.capitalize()}: {', '.join(changed)}.",
                             data={'nodes': changed})

    @property
    def changes_view(self) -> bool:
        return True


# ═════════════════════════════════════════════════════════════════
#  SESSION COMMANDS
# ═════════════════════════════════════════════════════════════════

class SaveCommand(Command):
    """
    Persist the target descriptor and the view state.

    Syntax:
        save
    """

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        try:
            view_state = platform.save_all()
        except OSError as e:
            return CommandResult(False, f"Save failed: {e}")
        return CommandResult(
            True,
            f"Saved view state ({len(view_state.positions)} position(s)).",
            data={'view_state': view_state.to_dict()},
        )


class ReloadCommand(Command):
    """
    Reload the current data source.  Reloading is asynchronous, so the
    processor hands it back to the caller as a sentinel.

    Syntax:
        reload
    """

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        return CommandResult(True, "RELOAD", data={"action": "reload"})


class UndoCommand(Command):
    """
    Undo the last view change.  Handled specially by ``CommandProcessor``.

    Syntax:
        undo
    """

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        # The actual undo logic is in CommandProcessor
        return CommandResult(True, "Undo delegated to processor.")


# ═════════════════════════════════════════════════════════════════
#  INFORMATIONAL COMMANDS (no view change)
# ═════════════════════════════════════════════════════════════════

class InfoCommand(Command):
    """
    Display details about an element, the selection, or the graph.

    Syntax:
        info <id>
        info   (selection detail, or graph summary when nothing is selected)
    """

    def __init__(self, element_id: Optional[str] = None):
        self._element_id = element_id

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        engine = platform.engine

        if self._element_id is None:
            detail = platform.describe_selection()
            if detail:
                return CommandResult(True, detail)
            workspace = platform.workspace
            msg = (
                f"Source '{workspace.data_source or '-'}': "
                f"{len(engine.nodes())} node(s), "
                f"{len(engine.edges())} edge(s), "
                f"locked={engine.is_locked()}, "
                f"zoom={engine.get_camera().zoom:g}"
            )
            return CommandResult(True, msg)

        element = engine.get_element(self._element_id)
        if element is None:
            return CommandResult(False, f"Element '{self._element_id}' not found.")
        data = element.to_dict()
        if element.is_node:
            data['position'] = engine.get_position(element.element_id).to_dict()
            data['collapsed'] = engine.is_collapsed(element.element_id)
        return CommandResult(True, json.dumps(data, indent=2, ensure_ascii=False, default=str),
                             data=data)


class ListCommand(Command):
    """
    List all nodes or edges in the live graph.

    Syntax:
        list nodes
        list edges
        list   (lists both)
    """

    def __init__(self, target: Optional[str] = None):
        self._target = target  # "nodes", "edges", or None

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        engine = platform.engine
        selection = engine.get_selection()
        lines: List[str] = []

        if self._target in (None, "nodes"):
            nodes = engine.nodes()
            lines.append(f"── Nodes ({len(nodes)}) ──")
            for node in nodes:
                pos = engine.get_position(node.element_id)
                line = f"  [{node.element_id}] {node.label} @ ({pos.x:g}, {pos.y:g})"
                if node.parent is not None:
                    line += f"  in {node.parent}"
                if engine.is_collapsed(node.element_id):
                    line += "  (collapsed)"
                if node.element_id in selection:
                    line += "  *"
                lines.append(line)

        if self._target in (None, "edges"):
            edges = engine.edges()
            lines.append(f"── Edges ({len(edges)}) ──")
            for edge in edges:
                line = f"  {edge.source} -> {edge.target}"
                if edge.label:
                    line += f"  ({edge.label})"
                lines.append(line)

        return CommandResult(True, "\n".join(lines))


class HelpCommand(Command):
    """
    Display available CLI commands.

    Syntax:
        help
    """

    def execute(self, platform: GraphViewPlatform) -> CommandResult:
        help_text = """
Available commands:
───────────────────────────────────────────────────────
  select <id> [<id> ...]
      Replace the selection with the given elements.

  select-all
      Select every node.

  move <node_id> <x> <y>
      Move a node (not while locked).

  zoom <factor>
      Set the zoom factor (must be positive).

  pan <x> <y>
      Set the pan offset.

  lock | unlock
      Lock or unlock node positions.

  expand | collapse | toggle [<id> ...]
      Expand or collapse the selected compound nodes.

  info [<id>]
      Show an element, the selection, or a graph summary.

  list [nodes|edges]
      List all nodes, edges, or both.

  save
      Save the data source and the view state.

  reload
      Reload the data source, keeping the view state.

  undo
      Undo the last view change.

  help
      Show this help text.
───────────────────────────────────────────────────────
""".strip()
        return CommandResult(True, help_text)
