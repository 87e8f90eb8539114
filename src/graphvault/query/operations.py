# src/graphvault/query/operations.py
"""
Typed graph operations and their execution.

Each command the text interpreter understands is one pydantic model with a
literal ``kind`` tag. ``execute_query`` applies an operation to a graph and
reports the outcome as a QueryResult instead of raising.
"""
import logging
import math
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from graphvault.core.errors import GraphError
from graphvault.core.graph import Graph
from graphvault.core.graph_node import GraphNode

logger = logging.getLogger(__name__)


class _Operation(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddNode(_Operation):
    """ADD <id> <label>"""
    kind: Literal["add_node"] = "add_node"
    node_id: int = Field(..., ge=0)
    label: str


class GetNode(_Operation):
    """GET <id>"""
    kind: Literal["get_node"] = "get_node"
    node_id: int = Field(..., ge=0)


class DeleteNode(_Operation):
    """DELETE <id>"""
    kind: Literal["delete_node"] = "delete_node"
    node_id: int = Field(..., ge=0)


class PleaseDeleteNode(_Operation):
    """PLEASE DELETE <id>"""
    kind: Literal["please_delete_node"] = "please_delete_node"
    node_id: int = Field(..., ge=0)


class AddEdge(_Operation):
    """EDGE <from> <to> <weight> [label]"""
    kind: Literal["add_edge"] = "add_edge"
    from_id: int = Field(..., ge=0)
    to_id: int = Field(..., ge=0)
    weight: float = Field(default=1.0, ge=0.0, allow_inf_nan=False)
    label: Optional[str] = None


class ShortestPaths(_Operation):
    """DIJKSTRA <id>"""
    kind: Literal["shortest_paths"] = "shortest_paths"
    source: int = Field(..., ge=0)


Query = Annotated[
    Union[AddNode, GetNode, DeleteNode, PleaseDeleteNode, AddEdge, ShortestPaths],
    Field(discriminator="kind"),
]


class QueryResult(BaseModel):
    """Outcome of one executed query."""

    ok: bool
    message: str
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, message: str, data: Optional[Dict[str, Any]] = None) -> "QueryResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str) -> "QueryResult":
        return cls(ok=False, message=message)


def _format_distance(distance: float) -> str:
    return "inf" if math.isinf(distance) else f"{distance:g}"


def execute_query(graph: Graph, query: Query) -> QueryResult:
    """
    Apply a query to the graph.

    Args:
        graph: Graph to read or mutate
        query: Parsed operation

    Returns:
        QueryResult describing what happened. Core failures (missing node,
        refused delete) come back as ok=False rather than exceptions.
    """
    if isinstance(query, AddNode):
        graph.add_node(GraphNode.new(query.node_id, query.label))
        return QueryResult.success(f"Node {query.node_id} added successfully.")

    if isinstance(query, GetNode):
        node = graph.get_node(query.node_id)
        if node is None:
            return QueryResult.failure(f"Node {query.node_id} not found.")
        label = node.label if node.label is not None else "No label"
        return QueryResult.success(
            f"Node {query.node_id}: {label}",
            data={"id": node.id, "label": node.label, "properties": dict(node.properties)},
        )

    if isinstance(query, DeleteNode):
        graph.delete_node(query.node_id)
        return QueryResult.success(f"Node {query.node_id} deleted.")

    if isinstance(query, PleaseDeleteNode):
        try:
            graph.delete_node_please(query.node_id)
        except GraphError as e:
            logger.debug("Guarded delete of node %s refused: %s", query.node_id, e)
            return QueryResult.failure(f"Failed to delete node {query.node_id}: {e}")
        return QueryResult.success(f"Node {query.node_id} deleted successfully.")

    if isinstance(query, AddEdge):
        edge = graph.add_edge(query.from_id, query.to_id, query.weight, query.label)
        return QueryResult.success(
            f"Edge {edge.id} added from {edge.from_id} to {edge.to_id}.",
            data={"id": edge.id},
        )

    if isinstance(query, ShortestPaths):
        distances = graph.dijkstra(query.source)
        listing = ", ".join(
            f"{node_id}={_format_distance(distances[node_id])}" for node_id in sorted(distances)
        )
        return QueryResult.success(
            f"Distances from node {query.source}: {listing}",
            data={"distances": distances},
        )

    raise TypeError(f"Unsupported query type: {type(query).__name__}")
