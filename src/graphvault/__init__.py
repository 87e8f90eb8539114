# src/graphvault/__init__.py
r"""
GraphVault - embeddable weighted graph store for Python

GraphVault keeps labeled nodes and directed, weighted edges in memory with:
- Pydantic GraphNode/GraphEdge models with string property bags
- An outgoing adjacency index kept consistent on every mutation
- Guarded deletes and core-node marking
- Single-source shortest paths (Dijkstra)
- Versioned JSON snapshots and Graphviz DOT export
- A small text command language and an asyncio-locked engine

Example:
    ```python
    from graphvault import Graph, GraphNode

    graph = Graph(name="roads")
    for node_id in (1, 2, 3, 4):
        graph.add_node(GraphNode.new(node_id, f"City {node_id}"))

    graph.add_edge(1, 2, 1.0)
    graph.add_edge(1, 3, 4.0)
    graph.add_edge(2, 3, 2.0)
    graph.add_edge(3, 4, 1.0)

    graph.dijkstra(1)   # {1: 0.0, 2: 1.0, 3: 3.0, 4: 4.0}
    ```
"""

# Core graph functionality
from graphvault.core.graph import Graph
from graphvault.core.graph_node import GraphNode
from graphvault.core.graph_edge import GraphEdge
from graphvault.core.snapshot import GraphSnapshot
from graphvault.core.errors import (
    GraphError,
    NodeNotFoundError,
    NotCoreNodeError,
    UnsafeDeleteError,
    QueryParseError,
    SnapshotError,
)

# Persistence
from graphvault.storage.storage import Storage

# Command surface
from graphvault.query.operations import Query, QueryResult, execute_query
from graphvault.query.parser import parse_query

# Engine
from graphvault.engine import GraphEngine, create_graph_engine

# Version info
__version__ = "0.1.0"

# Main exports
__all__ = [
    # Core classes
    "Graph",
    "GraphNode",
    "GraphEdge",
    "GraphSnapshot",

    # Errors
    "GraphError",
    "NodeNotFoundError",
    "NotCoreNodeError",
    "UnsafeDeleteError",
    "QueryParseError",
    "SnapshotError",

    # Persistence
    "Storage",

    # Queries
    "Query",
    "QueryResult",
    "execute_query",
    "parse_query",

    # Engine
    "GraphEngine",
    "create_graph_engine",

    # Version
    "__version__",
]
