# src/graphvault/query/parser.py
import logging
import math
from typing import List

from graphvault.core.errors import QueryParseError
from graphvault.query.operations import (
    AddEdge,
    AddNode,
    DeleteNode,
    GetNode,
    PleaseDeleteNode,
    Query,
    ShortestPaths,
)

logger = logging.getLogger(__name__)

INVALID_NODE_ID = "Invalid node ID"
INVALID_WEIGHT = "Invalid weight"
UNSUPPORTED_COMMAND = "Unsupported command"


def _parse_id(token: str) -> int:
    # Ids are unsigned; "-1" and "+1" are rejected like any non-digit token
    if not (token.isascii() and token.isdigit()):
        raise QueryParseError(INVALID_NODE_ID)
    return int(token)


def _parse_weight(token: str) -> float:
    try:
        weight = float(token)
    except ValueError:
        raise QueryParseError(INVALID_WEIGHT) from None
    if not (math.isfinite(weight) and weight >= 0.0):
        raise QueryParseError(INVALID_WEIGHT)
    return weight


def parse_query(text: str) -> Query:
    """
    Parse one line of command text into a typed operation.

    Supported commands::

        ADD <id> <label>
        GET <id>
        DELETE <id>
        PLEASE DELETE <id>
        EDGE <from> <to> <weight> [label]
        DIJKSTRA <id>

    Raises:
        QueryParseError: the line is empty, unknown, has the wrong number of
            tokens, or carries a malformed id or weight
    """
    tokens: List[str] = text.split()
    if not tokens:
        raise QueryParseError(UNSUPPORTED_COMMAND)

    command, args = tokens[0], tokens[1:]

    if command == "ADD" and len(args) == 2:
        return AddNode(node_id=_parse_id(args[0]), label=args[1])

    if command == "GET" and len(args) == 1:
        return GetNode(node_id=_parse_id(args[0]))

    if command == "DELETE" and len(args) == 1:
        return DeleteNode(node_id=_parse_id(args[0]))

    if command == "PLEASE" and len(args) == 2 and args[0] == "DELETE":
        return PleaseDeleteNode(node_id=_parse_id(args[1]))

    if command == "EDGE" and len(args) in (3, 4):
        return AddEdge(
            from_id=_parse_id(args[0]),
            to_id=_parse_id(args[1]),
            weight=_parse_weight(args[2]),
            label=args[3] if len(args) == 4 else None,
        )

    if command == "DIJKSTRA" and len(args) == 1:
        return ShortestPaths(source=_parse_id(args[0]))

    logger.debug("Unsupported command: %r", text)
    raise QueryParseError(UNSUPPORTED_COMMAND)
