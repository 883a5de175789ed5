# graphview_core/services/exceptions.py

class DeserializationError(ValueError):
    """Raised when persisted bytes do not match the expected layout."""
    pass

class StructuralInconsistencyError(Exception):
    """Raised when a data set cannot be turned into a valid hierarchy."""
    pass

class HierarchyCycleError(StructuralInconsistencyError):
    """Raised in strict mode when parent references form a cycle."""

    def __init__(self, node_ids):
        self.node_ids = list(node_ids)
        super().__init__(
            f"Parent references form a cycle at: {', '.join(self.node_ids)}"
        )

class SynchronizationError(Exception):
    """Raised when rebuilding the live graph fails; the live graph is undefined afterwards."""
    pass
