from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from graphvault.core.graph import Graph
from graphvault.core.graph_node import GraphNode
from graphvault.core.errors import QueryParseError
from graphvault.query.operations import execute_query
from graphvault.query.parser import parse_query
from graphvault.storage.storage import Storage

STORE_ENV_VAR = "GRAPHVAULT_STORE"


def build_demo_graph() -> Graph:
    """Five nodes, seven weighted edges; the shortest path 1 -> 5 costs 4."""
    graph = Graph(name="demo")
    for node_id in range(1, 6):
        graph.add_node(GraphNode.new(node_id, f"Node {node_id}"))

    graph.add_edge(1, 2, 6.0, "Edge 1-2")
    graph.add_edge(1, 3, 1.0, "Edge 1-3")
    graph.add_edge(2, 3, 2.0, "Edge 2-3")
    graph.add_edge(2, 4, 2.0, "Edge 2-4")
    graph.add_edge(3, 4, 1.0, "Edge 3-4")
    graph.add_edge(3, 5, 4.0, "Edge 3-5")
    graph.add_edge(4, 5, 2.0, "Edge 4-5")
    return graph


def run_commands(graph: Graph, lines: TextIO, out: TextIO) -> int:
    """Execute one command per line. Returns the number of failed commands."""
    failures = 0
    for line in lines:
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        try:
            result = execute_query(graph, parse_query(line))
        except QueryParseError as e:
            failures += 1
            print(f"ERROR: {e}", file=out)
            continue
        if not result.ok:
            failures += 1
        print(f"{'OK' if result.ok else 'ERROR'}: {result.message}", file=out)
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="graphvault", description="In-memory weighted graph store")
    parser.add_argument("--store", type=str, default=os.environ.get(STORE_ENV_VAR),
                        help=f"Snapshot file to load before and save after the session (env: {STORE_ENV_VAR})")
    parser.add_argument("--dot", type=str, help="Write a Graphviz DOT export of the final graph")
    parser.add_argument("--demo", action="store_true",
                        help="Start from the demo graph and print distances from node 1")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    storage = Storage(Path(args.store)) if args.store else None

    if args.demo:
        graph = build_demo_graph()
        for node_id, distance in sorted(graph.dijkstra(1).items()):
            shown = "inf" if math.isinf(distance) else f"{distance:g}"
            print(f"Shortest path from Node 1 to Node {node_id}: {shown}")
    elif storage is not None and storage.exists():
        graph = storage.load_graph()
    else:
        graph = Graph()

    failures = 0
    if not args.demo:
        failures = run_commands(graph, sys.stdin, sys.stdout)

    # The demo graph never replaces a stored graph
    if storage is not None and not args.demo:
        storage.save_graph(graph)
    if args.dot:
        graph.write_dot(args.dot)
        print(f"Wrote {args.dot}")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
