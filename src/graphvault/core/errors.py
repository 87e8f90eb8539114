"""
Exceptions raised by GraphVault.

Guarded graph operations raise these; the query layer turns them into
failed results. Storage I/O errors are not wrapped.
"""


class GraphError(Exception):
    """Base class for all GraphVault errors."""


class NodeNotFoundError(GraphError):
    """A node id that an operation requires is not in the graph."""

    def __init__(self, node_id: int, message: str = "Node does not exist"):
        self.node_id = node_id
        super().__init__(message)


class NotCoreNodeError(GraphError):
    """The node is not marked as a core node."""

    def __init__(self, node_id: int, message: str = "Node is not a core node"):
        self.node_id = node_id
        super().__init__(message)


class UnsafeDeleteError(GraphError):
    """A guarded delete was refused because the node still has outgoing edges."""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Node {node_id} cannot be safely deleted.")


class QueryParseError(GraphError, ValueError):
    """Command text could not be parsed into a query."""


class SnapshotError(GraphError, ValueError):
    """A stored snapshot cannot be turned back into a graph."""


class SnapshotVersionError(SnapshotError):
    """The snapshot was written with an unsupported format version."""


class SnapshotIntegrityError(SnapshotError):
    """The snapshot decodes but breaks a graph invariant."""
