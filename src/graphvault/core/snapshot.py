"""
GraphVault snapshot contract

The on-disk shape of a graph is this model, not the in-memory layout of
Graph. Bump SNAPSHOT_FORMAT_VERSION whenever a field changes meaning.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict

from graphvault.core.errors import SnapshotIntegrityError, SnapshotVersionError
from graphvault.core.graph_edge import GraphEdge
from graphvault.core.graph_node import GraphNode

SNAPSHOT_FORMAT_VERSION = 1


class GraphSnapshot(BaseModel):
    """Whole-graph snapshot: nodes, edges, adjacency index and core nodes."""

    format_version: int = Field(default=SNAPSHOT_FORMAT_VERSION, description="Snapshot format version")
    name: Optional[str] = Field(default=None, description="Graph name")
    nodes: Dict[int, GraphNode] = Field(default_factory=dict)
    edges: Dict[int, GraphEdge] = Field(default_factory=dict)
    adjacency_list: Dict[int, List[int]] = Field(
        default_factory=dict,
        description="Outgoing edge ids per node, in insertion order"
    )
    core_nodes: List[int] = Field(default_factory=list)
    next_edge_id: int = Field(default=1, ge=1, description="Next edge id to hand out")

    model_config = ConfigDict(extra="forbid")

    def check(self) -> "GraphSnapshot":
        """
        Validate the snapshot against the graph invariants.

        Returns:
            self, so calls can be chained

        Raises:
            SnapshotVersionError: format_version is not supported
            SnapshotIntegrityError: an invariant is broken
        """
        if self.format_version != SNAPSHOT_FORMAT_VERSION:
            raise SnapshotVersionError(
                f"Unsupported snapshot format version {self.format_version} "
                f"(expected {SNAPSHOT_FORMAT_VERSION})"
            )

        for node_id, node in self.nodes.items():
            if node.id != node_id:
                raise SnapshotIntegrityError(f"Node stored under {node_id} has id {node.id}")

        for edge_id, edge in self.edges.items():
            if edge.id != edge_id:
                raise SnapshotIntegrityError(f"Edge stored under {edge_id} has id {edge.id}")
            if edge_id not in self.adjacency_list.get(edge.from_id, []):
                raise SnapshotIntegrityError(
                    f"Edge {edge_id} missing from adjacency list of node {edge.from_id}"
                )

        for node_id, edge_ids in self.adjacency_list.items():
            for edge_id in edge_ids:
                edge = self.edges.get(edge_id)
                if edge is None:
                    raise SnapshotIntegrityError(
                        f"Adjacency list of node {node_id} references unknown edge {edge_id}"
                    )
                if edge.from_id != node_id:
                    raise SnapshotIntegrityError(
                        f"Edge {edge_id} listed under node {node_id} but starts at {edge.from_id}"
                    )

        for node_id in self.core_nodes:
            if node_id not in self.nodes:
                raise SnapshotIntegrityError(f"Core node {node_id} does not exist")

        return self
