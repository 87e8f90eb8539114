# src/graphvault/storage/storage.py
import logging
import os
from pathlib import Path
from typing import Union

from graphvault.core.graph import Graph
from graphvault.core.snapshot import GraphSnapshot

logger = logging.getLogger(__name__)


class Storage:
    """
    Flat-file persistence for a whole Graph.

    A save writes the complete snapshot as JSON; a load builds a brand new
    Graph from it. OS errors and pydantic validation errors reach the
    caller unchanged.
    """
    def __init__(
        self,
        path: Union[str, Path],
        indent: int = 2,
        encoding: str = "utf-8"
    ):
        """
        Args:
            path: File the snapshot is written to and read from.
            indent: JSON indentation used when saving.
            encoding: Text encoding of the file.
        """
        self.path: Path = Path(path)
        self.indent: int = indent
        self.encoding: str = encoding

    def exists(self) -> bool:
        return self.path.is_file()

    def save_graph(self, graph: Graph) -> None:
        """
        Write the graph to disk.

        The snapshot goes to a temporary sibling first and is then moved over
        the target, so readers never see a half-written file.
        """
        payload = graph.to_snapshot().model_dump_json(indent=self.indent)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(payload, encoding=self.encoding)
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.info(
            "Saved graph to %s (%d nodes, %d edges)",
            self.path, graph.node_count(), graph.edge_count()
        )

    def load_graph(self) -> Graph:
        """
        Read the graph from disk.

        Raises:
            OSError: the file cannot be read
            pydantic.ValidationError: the file is not a valid snapshot
            SnapshotError: the snapshot has an unknown version or breaks an invariant
        """
        payload = self.path.read_text(encoding=self.encoding)
        graph = Graph.from_snapshot(GraphSnapshot.model_validate_json(payload))
        logger.info(
            "Loaded graph from %s (%d nodes, %d edges)",
            self.path, graph.node_count(), graph.edge_count()
        )
        return graph

    def __repr__(self) -> str:
        return f"Storage(path='{self.path}')"
