"""
    Platform configuration - storage keys, serialization, reload policy.

    Provides a typed configuration object controlling where the platform
    persists its documents, how they are formatted and how the
    synchronizer reacts to malformed hierarchies.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SerializationConfig:
    """
    Controls how JSON documents are written.

    Attributes:
        indent:     Indentation of written JSON (``None`` for compact output).
        sort_keys:  Whether object keys are sorted.
    """
    indent: Optional[int] = 2
    sort_keys: bool = False


@dataclass
class PlatformConfig:
    """
    Top-level configuration for the Graph View platform.

    Attributes:
        serialization:         Controls JSON output.
        storage_dir:           Directory for file storage (``None`` keeps
                               everything in memory).
        target_key:            Storage key of the target document (the
                               data source descriptor being viewed).
        view_state_key:        Storage key of the persisted view state.
        settings_key:          Storage key of the stored settings.
        queries_key:           Storage key of the saved queries.
        max_history_depth:     How many view-state snapshots a Workspace
                               keeps for undo.
        default_data_source:   Entry-point name used when a descriptor
                               carries no ``type``.
        strict_hierarchy:      Fail synchronization on parent cycles instead
                               of breaking them.
        discard_stale_reloads: Drop a reload response when a newer reload
                               was started while it was in flight.
    """
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    storage_dir: Optional[str] = None
    target_key: str = "target.json"
    view_state_key: str = "target.viewstate.json"
    settings_key: str = "GRAPHVIEW::SETTINGS"
    queries_key: str = "GRAPHVIEW::QUERIES"
    max_history_depth: int = 50
    default_data_source: Optional[str] = None
    strict_hierarchy: bool = False
    discard_stale_reloads: bool = True
