"""Query executor interface and the in-memory reference executor.

The engine never talks to a data store directly. It hands a CompiledQuery to
something that implements QueryExecutor and gets a page of rows back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, Protocol, Sequence, runtime_checkable

from bookworm.core.errors import ExecutorError
from bookworm.models.predicate import column_value
from bookworm.models.query import CompiledQuery

logger = logging.getLogger(__name__)


@runtime_checkable
class QueryExecutor(Protocol):
    """Runs compiled queries against named collections."""

    async def execute(self, collection: str, query: CompiledQuery) -> list[Any]:
        """Return the page of rows selected by ``query``.

        Raises:
            ExecutorError: If the query cannot be run.
        """
        ...


class InMemoryExecutor:
    """Executor over rows held in memory.

    Evaluates the predicate tree against every row, sorts by the sort column
    with missing values last, then slices the page window.

    Example:
        executor = InMemoryExecutor({"books": [book.model_dump() for book in books]})
        rows = await executor.execute("books", compiler.compile(criteria))
    """

    def __init__(
        self,
        collections: Mapping[str, Iterable[Mapping[str, Any]]] | None = None,
        latency: float = 0.0,
    ) -> None:
        """Initialize the executor.

        Args:
            collections: Rows per collection name.
            latency: Seconds to sleep before answering, to stand in for a
                remote round trip.
        """
        self._collections: dict[str, list[Mapping[str, Any]]] = {
            name: list(rows) for name, rows in (collections or {}).items()
        }
        self.latency = latency
        self.calls = 0

    def add_collection(self, name: str, rows: Iterable[Mapping[str, Any]]) -> None:
        """Add or replace a collection."""
        self._collections[name] = list(rows)

    async def execute(self, collection: str, query: CompiledQuery) -> list[Any]:
        self.calls += 1
        if self.latency:
            await asyncio.sleep(self.latency)

        rows = self._collections.get(collection)
        if rows is None:
            raise ExecutorError(f"Unknown collection: {collection}")

        matched = [row for row in rows if query.predicate.matches(row)]
        ordered = self._sort(matched, query.sort.column, query.sort.ascending)
        page = ordered[query.offset:query.offset + query.limit]
        logger.debug(
            "%s: %d of %d rows match, returning %d",
            collection, len(matched), len(rows), len(page),
        )
        return page

    @staticmethod
    def _sort(rows: Sequence[Any], column: str, ascending: bool) -> list[Any]:
        present = [r for r in rows if column_value(r, column) is not None]
        missing = [r for r in rows if column_value(r, column) is None]
        try:
            present.sort(key=lambda r: column_value(r, column), reverse=not ascending)
        except TypeError as e:
            raise ExecutorError(f"Cannot sort on column {column!r}", cause=e) from e
        return present + missing
