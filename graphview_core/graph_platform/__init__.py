"""
Graph Platform - core package.

Public API:
    GraphViewPlatform   – central orchestrator (Facade)
    Workspace           – loaded data source + view-state history
    PlatformConfig      – top-level configuration
    SerializationConfig – JSON output control
    SettingsStore       – stored settings and saved queries
    PluginLoader        – generic plugin discovery
"""
from .core import (
    GraphViewPlatform,
    DefaultDataSource,
    EVENT_GRAPH_SYNCHRONIZED,
    EVENT_RELOAD_FAILED,
    EVENT_VIEW_STATE_SAVED,
)
from .workspace import Workspace
from .config import PlatformConfig, SerializationConfig
from .settings import Neo4jServer, SavedQuery, SettingsStore, StoredSettings
from .plugin_loader import (
    DATA_SOURCE_EP_GROUP,
    PluginLoader,
    create_data_source_loader,
)

__all__ = [
    'GraphViewPlatform',
    'DefaultDataSource',
    'EVENT_GRAPH_SYNCHRONIZED',
    'EVENT_RELOAD_FAILED',
    'EVENT_VIEW_STATE_SAVED',
    'Workspace',
    'PlatformConfig',
    'SerializationConfig',
    'Neo4jServer',
    'SavedQuery',
    'SettingsStore',
    'StoredSettings',
    'DATA_SOURCE_EP_GROUP',
    'PluginLoader',
    'create_data_source_loader',
]
