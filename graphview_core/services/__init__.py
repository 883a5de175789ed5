"""
Core services - tree utility, local cache, view state, synchronization, serialization.
"""
from .tree_service import (
    TreeNode,
    build_forest,
    ancestors,
    descendants,
    descendants_and_self,
    flatten,
)
from .cache_service import LocalCacheSynchronizer, CacheHandler, CachedValue
from .view_state_service import ViewStateStore
from .sync_service import GraphSynchronizer
from .serialization_service import DataSetSerializer, ViewStateSerializer
from .exceptions import (
    DeserializationError,
    StructuralInconsistencyError,
    HierarchyCycleError,
    SynchronizationError,
)

__all__ = [
    'TreeNode',
    'build_forest',
    'ancestors',
    'descendants',
    'descendants_and_self',
    'flatten',
    'LocalCacheSynchronizer',
    'CacheHandler',
    'CachedValue',
    'ViewStateStore',
    'GraphSynchronizer',
    'DataSetSerializer',
    'ViewStateSerializer',
    'DeserializationError',
    'StructuralInconsistencyError',
    'HierarchyCycleError',
    'SynchronizationError',
]
