"""
    CommandProcessor - parses raw CLI strings and dispatches commands.

    Design Patterns
    ───────────────
    • Interpreter   – verb plus arguments become a ``Command`` object.
    • Invoker       – snapshots the view state before every view change.

    Snapshots are kept in the platform's Workspace, so a reload (which
    replaces the live graph) also clears the undo history.
"""
from __future__ import annotations

import logging
import shlex
from typing import TYPE_CHECKING, List, Tuple

from .commands import (
    Command,
    CommandResult,
    SelectCommand,
    SelectAllCommand,
    MoveCommand,
    ZoomCommand,
    PanCommand,
    LockCommand,
    ExpandCollapseCommand,
    SaveCommand,
    ReloadCommand,
    UndoCommand,
    InfoCommand,
    ListCommand,
    HelpCommand,
)

if TYPE_CHECKING:
    from graphview_core.graph_platform.core import GraphViewPlatform

logger = logging.getLogger(__name__)


class CommandProcessor:
    """
    Parses raw CLI input, creates ``Command`` objects and executes them
    on the platform's live graph.

    Usage:
        processor = CommandProcessor(platform)
        result = processor.process("move a 10 20")
        if result.data.get("action") == "reload":
            await platform.reload_current()
    """

    def __init__(self, platform: GraphViewPlatform):
        self._platform = platform

    # ── Public API ───────────────────────────────────────────────

    def process(self, text: str) -> CommandResult:
        """
        Tokenize, parse and execute one line of input.

        Args:
            text:  Raw command line; ``#`` outside quotes starts a comment.

        Returns:
            ``CommandResult`` of the command, or a failed result describing
            the parse error.
        """
        try:
            tokens = self.tokenize(text)
            if not tokens:
                return CommandResult(False, "Empty command. Type 'help' for usage.")
            command = self._parse(tokens)
        except ValueError as e:
            return CommandResult(False, f"Parse error: {e}")

        return self._execute(command)

    @staticmethod
    def tokenize(text: str) -> List[str]:
        """
        Shell-style split with comment support.

        Example:
            >>> CommandProcessor.tokenize("select 'a b' c   # two nodes")
            ['select', 'a b', 'c']
        """
        lexer = shlex.shlex(text, posix=True)
        lexer.whitespace_split = True
        lexer.commenters = '#'
        return list(lexer)

    def get_undo_depth(self) -> int:
        """Number of view changes that can be undone."""
        return self._platform.workspace.history_depth

    # ── Execution engine ─────────────────────────────────────────

    def _execute(self, command: Command) -> CommandResult:
        if isinstance(command, UndoCommand):
            return self._do_undo()

        snapshot = self._platform.view_state_store.collect() if command.changes_view else None

        result = command.execute(self._platform)

        if result.success and snapshot is not None:
            self._platform.workspace.push_snapshot(snapshot)
        logger.debug("Command %s → %s", type(command).__name__, result.success)
        return result

    def _do_undo(self) -> CommandResult:
        """Pop the last snapshot and reapply it."""
        view_state = self._platform.workspace.undo()
        if view_state is None:
            return CommandResult(False, "Nothing to undo.")

        engine = self._platform.engine
        with engine.batch():
            self._platform.view_state_store.apply(view_state)
        return CommandResult(
            True,
            f"Undo successful (stack depth: {self.get_undo_depth()}).",
        )

    # ── Parser ───────────────────────────────────────────────────

    _NO_ARGS = {
        "help": HelpCommand,
        "undo": UndoCommand,
        "save": SaveCommand,
        "reload": ReloadCommand,
        "select-all": SelectAllCommand,
    }

    def _parse(self, tokens: List[str]) -> Command:
        """
        Build the ``Command`` for a tokenized line.

        Raises:
            ValueError: Unknown verb or bad arguments.
        """
        verb = tokens[0].lower()
        args = tokens[1:]

        if verb in self._NO_ARGS:
            if args:
                raise ValueError(f"'{verb}' takes no arguments.")
            return self._NO_ARGS[verb]()
        if verb in ("lock", "unlock"):
            return LockCommand(verb == "lock")

        if verb == "select":
            if not args:
                raise ValueError("Usage: select <id> [<id> ...]")
            return SelectCommand(args)

        if verb in ExpandCollapseCommand.MODES:
            return ExpandCollapseCommand(verb, args)

        if verb == "move":
            if len(args) != 3:
                raise ValueError("Usage: move <node_id> <x> <y>")
            x, y = self._parse_numbers(args[1:])
            return MoveCommand(args[0], x, y)

        if verb == "zoom":
            if len(args) != 1:
                raise ValueError("Usage: zoom <factor>")
            (zoom,) = self._parse_numbers(args)
            return ZoomCommand(zoom)

        if verb == "pan":
            if len(args) != 2:
                raise ValueError("Usage: pan <x> <y>")
            x, y = self._parse_numbers(args)
            return PanCommand(x, y)

        if verb == "list":
            target = args[0].lower() if args else None
            if target not in (None, "nodes", "edges"):
                raise ValueError(f"Unknown list target: '{target}'. Use 'nodes' or 'edges'.")
            return ListCommand(target)

        if verb == "info":
            if len(args) > 1:
                raise ValueError("Usage: info [<id>]")
            return InfoCommand(args[0] if args else None)

        raise ValueError(f"Unknown command: '{verb}'. Type 'help' for usage.")

    @staticmethod
    def _parse_numbers(tokens: List[str]) -> Tuple[float, ...]:
        try:
            return tuple(float(t) for t in tokens)
        except ValueError:
            raise ValueError(f"Expected numbers, got {tokens}.")
