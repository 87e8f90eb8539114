# tests/test_integrations.py
"""
Integration tests for GraphVault.

Tests the flow from text commands through the graph to storage and back,
checking that the graph invariants hold across every layer.
"""

import math

import pytest

# Test the main import flow
from graphvault import (
    Graph,
    GraphNode,
    Storage,
    create_graph_engine,
    execute_query,
    parse_query,
)


def check_invariants(graph: Graph) -> None:
    """Adjacency index, edges and core nodes agree with each other."""
    adjacency = graph.adjacency_list
    edges = graph.edges
    for node_id, edge_ids in adjacency.items():
        for edge_id in edge_ids:
            assert edge_id in edges
            assert edges[edge_id].from_id == node_id
    for edge in edges.values():
        assert edge.id in adjacency[edge.from_id]
    assert len(set(edges)) == len(edges)
    for node_id in graph.core_nodes:
        assert graph.has_node(node_id)


class TestCommandsToStorage:
    """Commands, shortest paths and persistence working together."""

    def test_complete_workflow(self, tmp_path):
        graph = Graph(name="integration_test")
        script = [
            "ADD 1 Depot",
            "ADD 2 Market",
            "ADD 3 Harbor",
            "ADD 4 Station",
            "EDGE 1 2 1",
            "EDGE 1 3 4",
            "EDGE 2 3 2",
            "EDGE 3 4 1",
        ]
        for line in script:
            assert execute_query(graph, parse_query(line)).ok
        check_invariants(graph)

        assert graph.dijkstra(1) == {1: 0.0, 2: 1.0, 3: 3.0, 4: 4.0}

        # Guarded delete refuses node 2 (it has an outgoing edge)
        refused = execute_query(graph, parse_query("PLEASE DELETE 2"))
        assert not refused.ok
        assert "Node 2" in refused.message

        # Unconditional delete always succeeds
        assert execute_query(graph, parse_query("DELETE 2")).ok
        check_invariants(graph)
        assert graph.dijkstra(1) == {1: 0.0, 3: 4.0, 4: 5.0}

        # New edges never reuse ids of deleted ones
        edge = graph.add_edge(4, 1, 1.0)
        assert edge.id == 5
        graph.add_core_node(4)

        storage = Storage(tmp_path / "workflow.json")
        storage.save_graph(graph)
        restored = storage.load_graph()

        check_invariants(restored)
        assert restored.node_count() == graph.node_count()
        assert restored.edge_count() == graph.edge_count()
        assert restored.adjacency_list == graph.adjacency_list
        assert restored.is_core_node(4)
        assert restored.dijkstra(3) == graph.dijkstra(3)

    def test_unreachable_after_delete(self):
        graph = Graph()
        for node_id in (1, 2, 3):
            graph.add_node(GraphNode.new(node_id, None))
        graph.add_edge(1, 2, 1.0)
        graph.add_edge(2, 3, 1.0)

        graph.delete_node(2)

        distances = graph.dijkstra(1)
        assert math.isinf(distances[3])
        check_invariants(graph)

    @pytest.mark.parametrize("victim", [1, 2, 3, 4, 5])
    def test_delete_any_node_keeps_invariants(self, victim):
        graph = Graph()
        for node_id in range(1, 6):
            graph.add_node(GraphNode.new(node_id, None))
        for from_id in range(1, 6):
            for to_id in range(1, 6):
                if (from_id + to_id) % 2:
                    graph.add_edge(from_id, to_id, float(from_id * to_id))

        graph.delete_node(victim)

        check_invariants(graph)
        assert all(victim not in (e.from_id, e.to_id) for e in graph.edges.values())


@pytest.mark.asyncio
class TestEngineIntegration:
    """The engine persists command sessions."""

    async def test_engine_session(self, tmp_path):
        path = tmp_path / "engine.json"

        async with create_graph_engine(path, save_on_close=True) as engine:
            for line in ["ADD 1 A", "ADD 2 B", "EDGE 1 2 2.5", "EDGE 2 1 1"]:
                assert (await engine.execute(line)).ok

        async with create_graph_engine(path) as engine:
            result = await engine.execute("DIJKSTRA 2")
            async with engine.transaction() as graph:
                check_invariants(graph)
                assert graph.next_edge_id == 3

        assert result.data["distances"] == {1: 1.0, 2: 0.0}
