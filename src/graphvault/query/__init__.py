"""
GraphVault Query Module

Typed operations, their text parser and the executor that applies them to
a Graph.
"""

from graphvault.query.operations import (
    AddEdge,
    AddNode,
    DeleteNode,
    GetNode,
    PleaseDeleteNode,
    Query,
    QueryResult,
    ShortestPaths,
    execute_query,
)
from graphvault.query.parser import parse_query

__all__ = [
    "AddEdge",
    "AddNode",
    "DeleteNode",
    "GetNode",
    "PleaseDeleteNode",
    "Query",
    "QueryResult",
    "ShortestPaths",
    "execute_query",
    "parse_query",
]
