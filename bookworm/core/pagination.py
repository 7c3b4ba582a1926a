"""Result accumulation across pages.

Page 1 replaces whatever was shown before, even with an empty list. Later
pages append, and an empty later page leaves the existing rows alone.
"""

from __future__ import annotations

from typing import Any, Sequence

from bookworm.core.compiler import PAGE_SIZE
from bookworm.models.query import ResultPage


class ResultAccumulator:
    """Owns the accumulated rows of a search session.

    Attributes:
        page_size: Rows per full page; a shorter page ends the result set.
        items: Rows accumulated so far.
        page_index: Last page applied, 0 before the first page arrives.
        has_more: Whether another page may hold more rows.
    """

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        self.page_size = page_size
        self.items: list[Any] = []
        self.page_index = 0
        self.has_more = True

    @property
    def loaded(self) -> bool:
        """True once a first page has arrived (even an empty one)."""
        return self.page_index > 0

    def reset(self) -> None:
        """Return to the not-yet-fetched state."""
        self.items = []
        self.page_index = 0
        self.has_more = True

    def on_page(self, page_index: int, rows: Sequence[Any]) -> ResultPage:
        """Apply a page of rows.

        Args:
            page_index: 1-indexed page the rows belong to.
            rows: Rows returned by the executor.

        Returns:
            The accumulated state after applying the page.
        """
        if page_index <= 1:
            self.items = list(rows)
        elif rows:
            self.items = self.items + list(rows)

        self.page_index = page_index
        self.has_more = len(rows) == self.page_size
        return self.snapshot()

    def snapshot(self) -> ResultPage:
        """Return the current state as an immutable ResultPage."""
        return ResultPage(
            items=tuple(self.items),
            page_index=max(self.page_index, 1),
            has_more=self.has_more,
        )
