# tests/storage/test_storage.py
"""
Tests for flat-file persistence.

Covers save/load round trips, atomic replacement of the snapshot file and
error propagation for unreadable or invalid files.
"""

import json
import math
import sys
import logging

import pytest
from pydantic import ValidationError

from graphvault.core.graph import Graph, GraphNode
from graphvault.core.errors import SnapshotIntegrityError
from graphvault.storage.storage import Storage


@pytest.fixture
def sample_graph() -> Graph:
    """Four nodes, four edges, one deleted node and one core node."""
    graph = Graph(name="stored")
    for node_id in range(1, 6):
        graph.add_node(GraphNode.new(node_id, f"Node{node_id}"))
    graph.add_edge(1, 2, 1.0, "a")
    graph.add_edge(1, 3, 4.0)
    graph.add_edge(2, 3, 2.0)
    graph.add_edge(3, 4, 1.0)
    graph.add_edge(5, 1, 1.0)
    graph.delete_node(5)
    graph.get_node(1).set_property("color", "blue")
    graph.add_core_node(4)
    return graph


@pytest.fixture
def storage(tmp_path) -> Storage:
    return Storage(tmp_path / "graph.json")


class TestStorageRoundTrip:
    """Save then load must give back an equivalent graph."""

    def test_round_trip(self, storage: Storage, sample_graph: Graph):
        storage.save_graph(sample_graph)
        loaded = storage.load_graph()

        assert loaded.node_count() == sample_graph.node_count()
        assert loaded.edge_count() == sample_graph.edge_count()
        assert loaded.adjacency_list == sample_graph.adjacency_list
        assert loaded.core_nodes == {4}
        assert loaded.get_node(1).get_property("color") == "blue"
        assert loaded.get_edge(1).label == "a"
        assert loaded.name == "stored"
        assert loaded.dijkstra(1) == sample_graph.dijkstra(1)

    def test_round_trip_empty_graph(self, storage: Storage):
        storage.save_graph(Graph())
        loaded = storage.load_graph()

        assert loaded.node_count() == 0
        assert loaded.edge_count() == 0

    def test_round_trip_extreme_weights(self, storage: Storage):
        """Zero and the largest finite weight survive a save/load cycle."""
        graph = Graph()
        for node_id in (1, 2, 3):
            graph.add_node(GraphNode.new(node_id, None))
        graph.add_edge(1, 2, 0.0)
        graph.add_edge(2, 3, sys.float_info.max)

        storage.save_graph(graph)
        loaded = storage.load_graph()

        assert loaded.get_edge(1).weight == 0.0
        assert loaded.get_edge(2).weight == sys.float_info.max
        assert loaded.dijkstra(1) == graph.dijkstra(1)
        assert loaded.to_dict() == Graph.from_json(graph.to_json()).to_dict()

    def test_infinite_weight_never_reaches_disk(self, storage: Storage):
        graph = Graph()
        with pytest.raises(ValidationError):
            graph.add_edge(1, 2, math.inf)

        storage.save_graph(graph)

        assert storage.load_graph().edge_count() == 0

    def test_load_replaces_state(self, storage: Storage, sample_graph: Graph):
        storage.save_graph(sample_graph)
        sample_graph.delete_node(1)

        loaded = storage.load_graph()

        assert loaded.has_node(1)
        assert not sample_graph.has_node(1)

    def test_edge_ids_continue_after_load(self, storage: Storage, sample_graph: Graph):
        storage.save_graph(sample_graph)
        loaded = storage.load_graph()

        assert loaded.add_edge(4, 1, 1.0).id == 6


class TestStorageFile:
    """Test the file written to disk."""

    def test_file_is_json(self, storage: Storage, sample_graph: Graph):
        storage.save_graph(sample_graph)
        data = json.loads(storage.path.read_text(encoding="utf-8"))

        assert set(data) == {
            "format_version", "name", "nodes", "edges",
            "adjacency_list", "core_nodes", "next_edge_id",
        }
        assert data["adjacency_list"]["1"] == [1, 2]

    def test_no_temp_file_left(self, storage: Storage, sample_graph: Graph):
        storage.save_graph(sample_graph)

        assert storage.exists()
        assert [p.name for p in storage.path.parent.iterdir()] == ["graph.json"]

    def test_save_overwrites(self, storage: Storage, sample_graph: Graph):
        storage.save_graph(sample_graph)
        storage.save_graph(Graph())

        assert storage.load_graph().node_count() == 0

    def test_indent_setting(self, tmp_path):
        compact = Storage(tmp_path / "compact.json", indent=None)
        compact.save_graph(Graph())

        assert "\n" not in compact.path.read_text(encoding="utf-8")

    def test_logs_save_and_load(self, storage: Storage, sample_graph: Graph, caplog):
        with caplog.at_level(logging.INFO, logger="graphvault.storage.storage"):
            storage.save_graph(sample_graph)
            storage.load_graph()

        assert "Saved graph to" in caplog.text
        assert "Loaded graph from" in caplog.text


class TestStorageErrors:
    """I/O and format errors reach the caller unchanged."""

    def test_missing_file(self, storage: Storage):
        assert not storage.exists()
        with pytest.raises(FileNotFoundError):
            storage.load_graph()

    def test_invalid_json(self, storage: Storage):
        storage.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValidationError):
            storage.load_graph()

    def test_broken_invariant(self, storage: Storage, sample_graph: Graph):
        data = sample_graph.to_dict()
        data["adjacency_list"]["1"].append(99)
        storage.path.write_text(json.dumps(data), encoding="utf-8")

        with pytest.raises(SnapshotIntegrityError):
            storage.load_graph()

    def test_save_into_missing_directory(self, tmp_path):
        storage = Storage(tmp_path / "missing" / "graph.json")
        with pytest.raises(FileNotFoundError):
            storage.save_graph(Graph())

    def test_failed_replace_removes_temp_file(self, storage: Storage, sample_graph: Graph, monkeypatch):
        storage.save_graph(Graph())

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("graphvault.storage.storage.os.replace", failing_replace)
        with pytest.raises(OSError, match="disk full"):
            storage.save_graph(sample_graph)

        assert [p.name for p in storage.path.parent.iterdir()] == ["graph.json"]
        # The previous snapshot is untouched
        assert storage.load_graph().node_count() == 0
