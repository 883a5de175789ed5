"""
CLI package - Command-Line Interface for view actions on the live graph.

Design Patterns
───────────────
• Command       – each CLI operation is a ``Command`` object with
                  ``execute()``; view changes are undone through
                  view-state snapshots.
• Interpreter   – parsing the CLI syntax into structured command objects.
"""
from .command_processor import CommandProcessor
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

__all__ = [
    'CommandProcessor',
    'Command',
    'CommandResult',
    'SelectCommand',
    'SelectAllCommand',
    'MoveCommand',
    'ZoomCommand',
    'PanCommand',
    'LockCommand',
    'ExpandCollapseCommand',
    'SaveCommand',
    'ReloadCommand',
    'UndoCommand',
    'InfoCommand',
    'ListCommand',
    'HelpCommand',
]
