# src/graphvault/engine.py
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional, Union

from graphvault.core.errors import QueryParseError
from graphvault.core.graph import Graph
from graphvault.query.operations import Query, QueryResult, execute_query
from graphvault.query.parser import parse_query
from graphvault.storage.storage import Storage

logger = logging.getLogger(__name__)


class GraphEngine:
    """
    Owns one Graph and the Storage it is persisted to.

    The graph itself does no locking. The engine is the single owner: every
    read, mutation, save and load goes through one asyncio.Lock, so tasks
    sharing an engine never see a graph in the middle of a change.
    """
    def __init__(
        self,
        path: Union[str, Path],
        engine_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initializes the GraphEngine. Does not touch the file yet.
        Call `await engine.open()` to load the graph.

        Args:
            path: Snapshot file backing this engine.
            engine_config: Overrides for the defaults below (indent, encoding,
                save_on_close).
        """
        _engine_defaults = {
            "indent": 2,
            "encoding": "utf-8",
            "save_on_close": False,
        }
        self.engine_config: Dict[str, Any] = {**_engine_defaults, **(engine_config or {})}

        self.storage = Storage(
            path,
            indent=self.engine_config["indent"],
            encoding=self.engine_config["encoding"],
        )

        self._graph: Optional[Graph] = None
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        """
        Load the graph from storage, or start empty if the file does not
        exist yet. Idempotent.
        """
        async with self._lock:
            if self._graph is not None:
                return

            if self.storage.exists():
                self._graph = await asyncio.to_thread(self.storage.load_graph)
            else:
                logger.info("No snapshot at %s, starting with an empty graph", self.storage.path)
                self._graph = Graph()

    async def close(self) -> None:
        """Release the graph, saving it first when save_on_close is set."""
        async with self._lock:
            if self._graph is None:
                return
            if self.engine_config["save_on_close"]:
                await asyncio.to_thread(self.storage.save_graph, self._graph)
            self._graph = None
            logger.info("GraphEngine for %s closed", self.storage.path)

    async def save(self) -> None:
        """Write the whole graph to storage."""
        async with self._lock:
            await asyncio.to_thread(self.storage.save_graph, self._require_graph())

    async def load(self) -> None:
        """Replace the in-memory graph with the stored one."""
        async with self._lock:
            self._require_graph()
            self._graph = await asyncio.to_thread(self.storage.load_graph)

    async def execute(self, query: Union[str, Query]) -> QueryResult:
        """
        Run one query against the graph.

        Text is parsed first; a parse failure is reported as a failed result
        and never reaches the graph.
        """
        if isinstance(query, str):
            try:
                query = parse_query(query)
            except QueryParseError as e:
                return QueryResult.failure(str(e))

        async with self._lock:
            return execute_query(self._require_graph(), query)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Graph]:
        """
        Hold the engine lock and expose the graph for direct API calls.

        Example:
            async with engine.transaction() as graph:
                graph.add_edge(1, 2, 3.0)
        """
        async with self._lock:
            yield self._require_graph()

    def _require_graph(self) -> Graph:
        if self._graph is None:
            raise RuntimeError(
                f"GraphEngine for {self.storage.path} is not open. Call `await engine.open()` first."
            )
        return self._graph

    @property
    def is_open(self) -> bool:
        """Returns True if the engine currently holds a graph."""
        return self._graph is not None

    async def __aenter__(self) -> "GraphEngine":
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def create_graph_engine(
    path: Union[str, Path],
    **engine_config: Any
) -> GraphEngine:
    """
    Creates and returns a GraphEngine for a snapshot file.

    The engine must be opened with `await engine.open()` or used as an
    async context manager (`async with engine:`).

    Args:
        path: Snapshot file backing the engine.
        **engine_config: indent, encoding, save_on_close.
    """
    logger.debug("Creating GraphEngine for %s", path)
    return GraphEngine(path=path, engine_config=engine_config)
