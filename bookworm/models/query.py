"""Query-side data models for bookworm.

These models describe what flows through the engine: tokens parsed from the
search box, path-derived metadata overrides, the compiled query handed to an
executor, and the pages and view state that come back.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from bookworm.models.predicate import AllOf


class QueryToken(BaseModel):
    """A ``field:value`` token found in free text.

    Attributes:
        field: Lower-cased field name (e.g. "publisher").
        value: Token value with surrounding quotes removed.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    value: str


class MetadataOverride(BaseModel):
    """A single-field filter taken from URL path segments.

    While a navigation carries an override it is the primary search clause;
    the filter panel still refines the results.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    value: str

    def as_query_text(self) -> str:
        """Return the ``field:"value"`` form shown in the search box."""
        return f'{self.field}:"{self.value}"'


class SortClause(BaseModel):
    """Sort column and direction."""

    model_config = ConfigDict(frozen=True)

    column: str
    direction: Literal["asc", "desc"] = "desc"

    @property
    def ascending(self) -> bool:
        return self.direction == "asc"


class CompiledQuery(BaseModel):
    """The query handed to an executor.

    Attributes:
        predicate: AND group of every clause; empty means "browse all".
        sort: Sort column and direction.
        offset: Index of the first row of the page.
        limit: Maximum number of rows in the page.
    """

    model_config = ConfigDict(frozen=True)

    predicate: AllOf = Field(default_factory=AllOf)
    sort: SortClause
    offset: int = 0
    limit: int = 20

    def __str__(self) -> str:
        return (
            f"WHERE {self.predicate} ORDER BY {self.sort.column} "
            f"{self.sort.direction.upper()} OFFSET {self.offset} LIMIT {self.limit}"
        )


class ResultPage(BaseModel):
    """Accumulated results after a page arrived.

    Attributes:
        items: Every row accumulated so far.
        page_index: The page that produced this state (1-indexed).
        has_more: Whether another page may hold more rows.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[Any, ...] = ()
    page_index: int = 1
    has_more: bool = True


class SearchView(BaseModel):
    """State exposed to the rendering layer."""

    model_config = ConfigDict(frozen=True)

    items: tuple[Any, ...] = ()
    loading: bool = False
    has_more: bool = True
    error: str | None = None
