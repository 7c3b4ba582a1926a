"""SearchSession: reconciles navigation and interactive input into fetches.

Three kinds of input reach a session:
- path metadata (``/search/<field>/<value>``), via navigate()
- a single query parameter, via navigate()
- interactive changes: search box, filter panel, categories, load more

Store mutations never fetch on their own. Each transition bumps the session
generation and issues exactly one fetch stamped with it. A response that
comes back after a newer transition is dropped, so a slow old response can
never overwrite a newer one. Nothing is cancelled; stale results are simply
ignored.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from bookworm.core.compiler import QueryCompiler
from bookworm.core.errors import ExecutorError, InputError
from bookworm.core.executor import QueryExecutor
from bookworm.core.navigation import NavigationRequest, decode_path_value
from bookworm.core.pagination import ResultAccumulator
from bookworm.core.registry import is_metadata_field
from bookworm.core.store import FilterStateStore
from bookworm.core.tokens import apply_tokens, parse_tokens
from bookworm.models.query import CompiledQuery, MetadataOverride, SearchView

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "books"


class FetchState(str, Enum):
    """Lifecycle of the newest fetch."""

    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    ERROR = "error"


class SearchSession:
    """State machine driving one search page.

    All methods must run on a single event loop. The executor call is the
    only await point.

    Attributes:
        store: Owner of the filter criteria.
        override: Metadata override of the current navigation, if any. It
            stays in force across interactive changes until the next
            navigation.
        categories: Selected categories, in selection order.
        page: Last page accepted under the current search state, 0 after
            any page-1 transition until its response arrives.
        generation: Incremented by every transition that fetches.
        state: State of the newest fetch.
        error: User-visible error text, or None.

    Example:
        session = SearchSession(InMemoryExecutor({"books": rows}))
        await session.navigate(field="publisher", value="Penguin-Books")
        await session.update_filter("yearFrom", 2000)
        await session.load_more()
        session.view.items
    """

    def __init__(
        self,
        executor: QueryExecutor,
        collection: str = DEFAULT_COLLECTION,
        store: Optional[FilterStateStore] = None,
        compiler: Optional[QueryCompiler] = None,
    ) -> None:
        self.executor = executor
        self.collection = collection
        self.store = store if store is not None else FilterStateStore()
        self.compiler = compiler if compiler is not None else QueryCompiler()
        self.results = ResultAccumulator(self.compiler.page_size)

        self.override: Optional[MetadataOverride] = None
        self.categories: tuple[str, ...] = ()
        self.page = 0
        self.generation = 0
        self.state = FetchState.IDLE
        self.error: Optional[str] = None
        self.last_query: Optional[CompiledQuery] = None
        self._input_error = False

    @property
    def loading(self) -> bool:
        return self.state is FetchState.FETCHING

    @property
    def view(self) -> SearchView:
        """State for the rendering layer."""
        return SearchView(
            items=tuple(self.results.items),
            loading=self.loading,
            has_more=self.results.has_more,
            error=self.error,
        )

    # Navigation

    async def navigate(
        self,
        field: Optional[str] = None,
        value: Optional[str] = None,
        query: Optional[str] = None,
    ) -> SearchView:
        """Handle a navigation.

        Args:
            field: Metadata field path segment.
            value: Metadata value path segment, still URL encoded.
            query: Free-text query parameter.

        Path metadata wins over the query parameter. With neither, the
        filters go back to their defaults.
        """
        self.override = None
        self.results.reset()
        self._input_error = False

        if field is not None or value is not None:
            return await self._navigate_metadata(field, value)

        if query:
            return await self.submit_query(query)

        self.store.reset()
        return await self._refresh()

    async def navigate_to(self, request: NavigationRequest) -> SearchView:
        """Handle a navigation described by a NavigationRequest."""
        return await self.navigate(request.field, request.value, request.query)

    async def _navigate_metadata(
        self, field: Optional[str], value: Optional[str]
    ) -> SearchView:
        try:
            override = self._build_override(field, value)
        except InputError as e:
            # No fetch; any fetch still in flight is now stale
            self.generation += 1
            self._input_error = True
            self.state = FetchState.ERROR
            self.error = str(e)
            logger.warning("Rejected metadata navigation: %s", e)
            return self.view

        self.override = override
        self.store.update("query", override.as_query_text())
        return await self._refresh()

    @staticmethod
    def _build_override(field: Optional[str], value: Optional[str]) -> MetadataOverride:
        if not field or not value:
            raise InputError("Missing metadata field or value")
        if not is_metadata_field(field):
            raise InputError(f"Unknown metadata field: {field}")
        decoded = decode_path_value(value)
        if not decoded:
            raise InputError("Missing metadata field or value")
        return MetadataOverride(field=field.lower(), value=decoded)

    # Interactive changes

    async def submit_query(self, text: str) -> SearchView:
        """Set the search box text and apply its field tokens.

        While a metadata override is active the override stays the primary
        clause; the tokens still refine the results.
        """
        self.store.update("query", text)
        apply_tokens(self.store, parse_tokens(text).tokens)
        return await self._refresh()

    async def update_filter(self, key: str, value: Any) -> SearchView:
        """Replace one filter field and fetch page 1."""
        self.store.update(key, value)
        return await self._refresh()

    async def update_filters(self, updates: Mapping[str, Any]) -> SearchView:
        """Replace several filter fields and fetch page 1 once."""
        self.store.update_many(updates)
        return await self._refresh()

    async def reset_filters(self) -> SearchView:
        """Restore default filters and fetch page 1."""
        self.store.reset()
        return await self._refresh()

    async def set_categories(self, categories: Iterable[str]) -> SearchView:
        """Replace the selected categories and fetch page 1."""
        self.categories = tuple(dict.fromkeys(c for c in categories if c))
        return await self._refresh()

    async def toggle_category(self, category: str) -> SearchView:
        """Select a category, or deselect it if already selected."""
        if category in self.categories:
            remaining = [c for c in self.categories if c != category]
        else:
            remaining = [*self.categories, category]
        return await self.set_categories(remaining)

    async def load_more(self) -> SearchView:
        """Fetch the next page and append it.

        Does nothing while a fetch is in flight, when the last page was
        short, or when the navigation itself was invalid.
        """
        if self.loading or not self.results.has_more or self._input_error:
            return self.view
        return await self._refresh(self.page + 1)

    # Fetching

    async def _refresh(self, page: int = 1) -> SearchView:
        if self._input_error:
            return self.view

        self.generation += 1
        generation = self.generation
        if page == 1:
            # Later pages must follow a page 1 fetched with these criteria
            self.page = 0
        self.last_query = self.compiler.compile(
            self.store.get(), self.override, self.categories, page
        )
        self.state = FetchState.FETCHING
        self.error = None
        logger.debug("Fetch %d issued for page %d", generation, page)

        try:
            rows = await self.executor.execute(self.collection, self.last_query)
        except ExecutorError as e:
            if generation != self.generation:
                logger.debug("Discarding stale failure of fetch %d", generation)
                return self.view
            self.state = FetchState.ERROR
            self.error = f"Error fetching books: {e.message}"
            logger.warning("Fetch %d failed: %s", generation, e.message)
            return self.view

        if generation != self.generation:
            logger.debug(
                "Discarding stale response of fetch %d (current %d)",
                generation, self.generation,
            )
            return self.view

        self.results.on_page(page, rows)
        self.page = page
        self.state = FetchState.SUCCESS
        return self.view
