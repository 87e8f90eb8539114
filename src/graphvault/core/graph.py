"""
GraphVault Core Graph Implementation

This module contains the core Graph class: an in-memory directed, weighted
graph with an outgoing adjacency index, core-node marking and single-source
shortest paths.
"""
from typing import (
    Dict,
    List,
    Set,
    Optional,
    Any,
    Tuple,
    Iterator,
    Union,
)
from pathlib import Path
import heapq
import json
import logging
import math

from graphvault.core.errors import NodeNotFoundError, NotCoreNodeError, UnsafeDeleteError
from graphvault.core.graph_node import GraphNode
from graphvault.core.graph_edge import GraphEdge
from graphvault.core.snapshot import GraphSnapshot

logger = logging.getLogger(__name__)


class Graph:
    """
    In-memory directed, weighted graph.

    The graph owns every node and edge. The adjacency index maps a node id
    to the ids of its outgoing edges in insertion order; incoming edges are
    only found by scanning. No internal locking: callers that share a graph
    between tasks must serialize access (see GraphEngine).
    """

    def __init__(self, name: Optional[str] = None):
        """Initialize empty graph."""
        self.name = name

        # Core storage
        self._nodes: Dict[int, GraphNode] = {}
        self._edges: Dict[int, GraphEdge] = {}

        # Outgoing edge ids per node
        self._adjacency: Dict[int, List[int]] = {}

        self._core_nodes: Set[int] = set()

        # Never derived from len(edges), so ids stay unique after deletions
        self._next_edge_id = 1

    # =============================================================================
    # BASIC GRAPH OPERATIONS
    # =============================================================================

    def add_node(self, node: GraphNode) -> GraphNode:
        """Insert a node, replacing any node with the same id."""
        if node.id in self._nodes:
            logger.debug("Overwriting node %s", node.id)
        self._nodes[node.id] = node
        return node

    def create_node(
        self,
        node_id: int,
        label: Optional[str] = None,
        properties: Optional[Dict[str, str]] = None
    ) -> GraphNode:
        """Build a node and insert it."""
        node = GraphNode(id=node_id, label=label, properties=properties or {})
        return self.add_node(node)

    def add_edge(
        self,
        from_id: int,
        to_id: int,
        weight: float = 1.0,
        label: Optional[str] = None,
        properties: Optional[Dict[str, str]] = None
    ) -> GraphEdge:
        """
        Add a directed edge and index it under its source node.

        Endpoints are not checked against the node set.

        Args:
            from_id: Source node id
            to_id: Target node id
            weight: Non-negative edge weight
            label: Optional edge label
            properties: Optional initial properties

        Returns:
            The new edge, carrying its freshly allocated id
        """
        edge = GraphEdge(
            id=self._next_edge_id,
            from_id=from_id,
            to_id=to_id,
            weight=weight,
            label=label,
            properties=properties or {}
        )
        self._next_edge_id += 1

        self._edges[edge.id] = edge
        self._adjacency.setdefault(from_id, []).append(edge.id)
        return edge

    def remove_edge(self, edge_id: int) -> bool:
        """Remove an edge by ID."""
        edge = self._edges.pop(edge_id, None)
        if edge is None:
            return False

        outgoing = self._adjacency.get(edge.from_id)
        if outgoing is not None:
            outgoing[:] = [e_id for e_id in outgoing if e_id != edge_id]
        return True

    def delete_node(self, node_id: int) -> None:
        """
        Remove a node together with every edge that touches it.

        Drops the node's adjacency entry, removes all edges where the node is
        source or target, scrubs those edge ids from every other adjacency
        list and unmarks the node as core. Does nothing if the node is absent.
        """
        if node_id not in self._nodes:
            return

        del self._nodes[node_id]
        self._adjacency.pop(node_id, None)
        self._core_nodes.discard(node_id)

        dropped = {
            edge_id for edge_id, edge in self._edges.items()
            if edge.from_id == node_id or edge.to_id == node_id
        }
        for edge_id in dropped:
            del self._edges[edge_id]

        if dropped:
            for edge_ids in self._adjacency.values():
                edge_ids[:] = [e_id for e_id in edge_ids if e_id not in dropped]

        logger.debug("Deleted node %s and %d edge(s)", node_id, len(dropped))

    def can_safely_delete(self, node_id: int) -> bool:
        """Check that the node has no outgoing edges. Incoming edges are not considered."""
        return not self._adjacency.get(node_id)

    def delete_node_please(self, node_id: int) -> None:
        """
        Delete a node only if it has no outgoing edges.

        Once the check passes this is exactly delete_node().

        Raises:
            UnsafeDeleteError: the node still has outgoing edges; the graph
                is left untouched
        """
        if not self.can_safely_delete(node_id):
            raise UnsafeDeleteError(node_id)
        self.delete_node(node_id)

    # =============================================================================
    # CORE NODES
    # =============================================================================

    def add_core_node(self, node_id: int) -> None:
        """Mark an existing node as core. Raises NodeNotFoundError otherwise."""
        if node_id not in self._nodes:
            raise NodeNotFoundError(node_id)
        self._core_nodes.add(node_id)

    def remove_core_node(self, node_id: int) -> None:
        """Unmark a core node. Raises NotCoreNodeError if it was not marked."""
        if node_id not in self._core_nodes:
            raise NotCoreNodeError(node_id)
        self._core_nodes.remove(node_id)

    def is_core_node(self, node_id: int) -> bool:
        return node_id in self._core_nodes

    @property
    def core_nodes(self) -> Set[int]:
        """Copy of the core node ids."""
        return set(self._core_nodes)

    # =============================================================================
    # GRAPH QUERIES
    # =============================================================================

    def get_node(self, node_id: int) -> Optional[GraphNode]:
        """Get a node by ID."""
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: int) -> Optional[GraphEdge]:
        """Get an edge by ID."""
        return self._edges.get(edge_id)

    def has_node(self, node_id: int) -> bool:
        """Check if node exists."""
        return node_id in self._nodes

    @property
    def nodes(self) -> Dict[int, GraphNode]:
        """Read-only view of nodes keyed by id (a shallow copy)."""
        return dict(self._nodes)

    @property
    def edges(self) -> Dict[int, GraphEdge]:
        """Read-only view of edges keyed by id (a shallow copy)."""
        return dict(self._edges)

    @property
    def adjacency_list(self) -> Dict[int, List[int]]:
        """Copy of the outgoing adjacency index."""
        return {node_id: list(edge_ids) for node_id, edge_ids in self._adjacency.items()}

    @property
    def next_edge_id(self) -> int:
        return self._next_edge_id

    def outgoing_edges(self, node_id: int) -> List[GraphEdge]:
        """Outgoing edges of a node, in insertion order."""
        return [self._edges[edge_id] for edge_id in self._adjacency.get(node_id, [])]

    def incoming_edges(self, node_id: int) -> List[GraphEdge]:
        """Incoming edges of a node. Scans every edge."""
        return [edge for edge in self._edges.values() if edge.to_id == node_id]

    def neighbors(self, node_id: int) -> List[int]:
        """Distinct targets of a node's outgoing edges, in first-seen order."""
        seen: Dict[int, None] = {}
        for edge in self.outgoing_edges(node_id):
            seen.setdefault(edge.to_id, None)
        return list(seen)

    # =============================================================================
    # GRAPH ALGORITHMS
    # =============================================================================

    def _search(self, source: int) -> Tuple[Dict[int, float], Dict[int, int]]:
        """Dijkstra from source. Returns (distances, predecessors)."""
        distances: Dict[int, float] = {node_id: math.inf for node_id in self._nodes}
        distances[source] = 0.0
        previous: Dict[int, int] = {}

        frontier: List[Tuple[float, int]] = [(0.0, source)]

        while frontier:
            cost, current = heapq.heappop(frontier)

            # Stale entry: a cheaper path was settled after this was pushed
            if cost > distances[current]:
                continue

            for edge_id in self._adjacency.get(current, []):
                edge = self._edges[edge_id]
                target = edge.to_id
                if target not in distances:
                    # Dangling endpoint, not a known node
                    continue

                candidate = cost + edge.weight
                if candidate < distances[target]:
                    distances[target] = candidate
                    previous[target] = current
                    heapq.heappush(frontier, (candidate, target))

        return distances, previous

    def dijkstra(self, source: int) -> Dict[int, float]:
        """
        Single-source shortest distances over non-negative weights.

        Every node known to the graph appears in the result; nodes that
        cannot be reached keep math.inf. The source maps to 0.0 even when
        it is not a known node. Order among equal distances is unspecified.
        """
        distances, _ = self._search(source)
        return distances

    def shortest_path(self, from_id: int, to_id: int) -> Optional[List[int]]:
        """Find the cheapest path between two nodes, or None if unreachable."""
        if from_id not in self._nodes or to_id not in self._nodes:
            return None

        if from_id == to_id:
            return [from_id]

        distances, previous = self._search(from_id)
        if math.isinf(distances[to_id]):
            return None

        path = [to_id]
        while path[-1] != from_id:
            path.append(previous[path[-1]])
        path.reverse()
        return path

    # =============================================================================
    # GRAPH STATISTICS
    # =============================================================================

    def node_count(self) -> int:
        """Get total number of nodes."""
        return len(self._nodes)

    def edge_count(self) -> int:
        """Get total number of edges."""
        return len(self._edges)

    # =============================================================================
    # SERIALIZATION
    # =============================================================================

    def to_snapshot(self) -> GraphSnapshot:
        """Capture the current state as a GraphSnapshot."""
        return GraphSnapshot(
            name=self.name,
            nodes={node_id: node.model_copy(deep=True) for node_id, node in self._nodes.items()},
            edges={edge_id: edge.model_copy(deep=True) for edge_id, edge in self._edges.items()},
            adjacency_list=self.adjacency_list,
            core_nodes=sorted(self._core_nodes),
            next_edge_id=self._next_edge_id,
        )

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> 'Graph':
        """Create graph from a snapshot, after checking its invariants."""
        snapshot.check()

        graph = cls(name=snapshot.name)
        graph._nodes = {node_id: node.model_copy(deep=True) for node_id, node in snapshot.nodes.items()}
        graph._edges = {edge_id: edge.model_copy(deep=True) for edge_id, edge in snapshot.edges.items()}
        graph._adjacency = {node_id: list(edge_ids) for node_id, edge_ids in snapshot.adjacency_list.items()}
        graph._core_nodes = set(snapshot.core_nodes)
        graph._next_edge_id = max([snapshot.next_edge_id] + [edge_id + 1 for edge_id in snapshot.edges])
        return graph

    def to_dict(self) -> Dict[str, Any]:
        """Convert graph to dictionary representation."""
        return self.to_snapshot().model_dump(mode="json")

    def to_json(self, indent: Optional[int] = None) -> str:
        """Convert graph to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Graph':
        """Create graph from dictionary representation."""
        return cls.from_snapshot(GraphSnapshot.model_validate(data))

    @classmethod
    def from_json(cls, json_str: str) -> 'Graph':
        """Create graph from JSON string."""
        return cls.from_snapshot(GraphSnapshot.model_validate_json(json_str))

    # =============================================================================
    # EXPORT
    # =============================================================================

    def to_dot(self) -> str:
        """Render the graph in Graphviz DOT format."""
        lines = ["digraph G {"]
        for node_id in sorted(self._nodes):
            label = self._nodes[node_id].label
            lines.append(f'    {node_id} [label="{_dot_escape(label if label is not None else str(node_id))}"];')
        for edge_id in sorted(self._edges):
            edge = self._edges[edge_id]
            text = f"{edge.label} ({edge.weight:g})" if edge.label else f"{edge.weight:g}"
            lines.append(f'    {edge.from_id} -> {edge.to_id} [label="{_dot_escape(text)}"];')
        lines.append("}")
        return "\n".join(lines) + "\n"

    def write_dot(self, path: Union[str, Path]) -> None:
        """Write the DOT rendering to a file."""
        Path(path).write_text(self.to_dot(), encoding="utf-8")
        logger.info("Wrote DOT export to %s", path)

    # =============================================================================
    # UTILITIES
    # =============================================================================

    def copy(self) -> 'Graph':
        """Create a deep copy of the graph."""
        return Graph.from_snapshot(self.to_snapshot())

    def clear(self):
        """Remove all nodes, edges and core marks. The edge id counter keeps running."""
        self._nodes.clear()
        self._edges.clear()
        self._adjacency.clear()
        self._core_nodes.clear()

    def __len__(self) -> int:
        """Return number of nodes."""
        return len(self._nodes)

    def __contains__(self, node_id: int) -> bool:
        """Check if node exists in graph."""
        return node_id in self._nodes

    def __iter__(self) -> Iterator[int]:
        """Iterate over node IDs."""
        return iter(self._nodes.keys())

    def __repr__(self) -> str:
        """String representation of graph."""
        return f"Graph(name={self.name!r}, nodes={self.node_count()}, edges={self.edge_count()})"


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
