"""
Example: a small road network with GraphVault.

Builds a graph through the command language, computes shortest distances,
persists it through a GraphEngine and exports a DOT file.
"""
import asyncio
import math
from pathlib import Path

from graphvault import create_graph_engine


COMMANDS = [
    "ADD 1 Depot",
    "ADD 2 Market",
    "ADD 3 Harbor",
    "ADD 4 Station",
    "ADD 5 Airport",
    "EDGE 1 2 1 road",
    "EDGE 1 3 4 ferry",
    "EDGE 2 3 2 road",
    "EDGE 3 4 1 rail",
]


async def main():
    print("=== GraphVault Routing Demo ===\n")

    async with create_graph_engine(Path("routing.json"), save_on_close=True) as engine:
        print("1. Building the network:")
        for line in COMMANDS:
            result = await engine.execute(line)
            print(f"   {line:<22} -> {result.message}")

        print("\n2. Shortest distances from the depot:")
        result = await engine.execute("DIJKSTRA 1")
        for node_id, distance in sorted(result.data["distances"].items()):
            shown = "unreachable" if math.isinf(distance) else f"{distance:g}"
            print(f"   Node {node_id}: {shown}")

        print("\n3. Guarded delete of a node with outgoing edges:")
        result = await engine.execute("PLEASE DELETE 2")
        print(f"   ✗ {result.message}")

        async with engine.transaction() as graph:
            graph.add_core_node(1)
            print(f"\n4. Cheapest route 1 -> 4: {graph.shortest_path(1, 4)}")
            graph.write_dot("routing.dot")

    print("\n✓ Saved routing.json and routing.dot")


if __name__ == "__main__":
    asyncio.run(main())
