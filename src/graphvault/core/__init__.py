"""
GraphVault Core Module

This module provides the graph data structures and the shortest-path
algorithm that the storage, query and engine layers build on.
"""

from graphvault.core.graph import Graph
from graphvault.core.graph_node import GraphNode
from graphvault.core.graph_edge import GraphEdge
from graphvault.core.snapshot import GraphSnapshot, SNAPSHOT_FORMAT_VERSION
from graphvault.core.errors import (
    GraphError,
    NodeNotFoundError,
    NotCoreNodeError,
    UnsafeDeleteError,
    QueryParseError,
    SnapshotError,
    SnapshotVersionError,
    SnapshotIntegrityError,
)

__all__ = [
    "Graph",
    "GraphNode",
    "GraphEdge",
    "GraphSnapshot",
    "SNAPSHOT_FORMAT_VERSION",
    "GraphError",
    "NodeNotFoundError",
    "NotCoreNodeError",
    "UnsafeDeleteError",
    "QueryParseError",
    "SnapshotError",
    "SnapshotVersionError",
    "SnapshotIntegrityError",
]
