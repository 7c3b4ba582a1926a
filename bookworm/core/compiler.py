"""QueryCompiler for turning filter state into an executor query.

The compiler is pure: the same criteria, override, categories and page
always produce an equal CompiledQuery. Bad values (such as a non-numeric
year) are left out of the predicate instead of raising, and non-text
values are compared as their string form.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from bookworm.core.registry import (
    CATEGORIES_COLUMN,
    FICTION_TYPE_COLUMN,
    LANGUAGE_COLUMN,
    PUBLISHER_COLUMN,
    TYPE_COLUMN,
    YEAR_COLUMN,
    build_field_clause,
    format_clause,
    general_fallback,
    genre_clause,
    is_metadata_field,
    parse_year,
    resolve_sort,
)
from bookworm.core.navigation import sanitize_value
from bookworm.core.tokens import parse_whole_token
from bookworm.models.criteria import ALL, FilterCriteria
from bookworm.models.predicate import AllOf, AnyOf, Contains, Eq, ILike, Predicate, Range
from bookworm.models.query import CompiledQuery, MetadataOverride

logger = logging.getLogger(__name__)

PAGE_SIZE = 20


def _text(value: object) -> Optional[str]:
    """Return a stored filter value as text, or None when it is unset."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text or None


class QueryCompiler:
    """Compiler from FilterCriteria to CompiledQuery.

    Clauses are AND-ed in a fixed order:
        1. primary text clause (metadata override, whole-string token,
           or free-text fallback)
        2. refinements from the filter panel
        3. selected categories (OR-ed among themselves)
    followed by the sort clause and the pagination window.
    """

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        self.page_size = page_size

    def compile(
        self,
        criteria: FilterCriteria,
        override: Optional[MetadataOverride] = None,
        categories: Iterable[str] = (),
        page: int = 1,
    ) -> CompiledQuery:
        """Compile the current search state.

        Args:
            criteria: Filter state from the FilterStateStore.
            override: Path-derived metadata filter. When given, it replaces
                the free-text clause and criteria.query is ignored.
            categories: Selected category labels.
            page: 1-indexed page number; values below 1 are treated as 1.

        Returns:
            The immutable query for the executor.
        """
        clauses: list[Predicate] = []

        primary = self.primary_clause(criteria, override)
        if primary is not None:
            clauses.append(primary)

        clauses.extend(self.refinement_clauses(criteria))

        category_clause = self.category_clause(categories)
        if category_clause is not None:
            clauses.append(category_clause)

        page = max(page, 1)
        query = CompiledQuery(
            predicate=AllOf(clauses=tuple(clauses)),
            sort=resolve_sort(criteria.sort_by),
            offset=(page - 1) * self.page_size,
            limit=self.page_size,
        )
        logger.debug("Compiled query: %s", query)
        return query

    def primary_clause(
        self,
        criteria: FilterCriteria,
        override: Optional[MetadataOverride] = None,
    ) -> Optional[Predicate]:
        """Build the text clause that drives the search.

        A whole-string token only counts when its field is registered, so
        text like ``Re:Zero`` is searched as typed.

        Returns:
            The clause, or None when there is nothing to search for.
        """
        if override is not None:
            return build_field_clause(override.field, sanitize_value(override.value))

        text = _text(criteria.query) or ""
        token = parse_whole_token(text)
        if token is not None and is_metadata_field(token.field):
            return build_field_clause(token.field, token.value)

        if text.strip():
            return general_fallback(text, exact=bool(criteria.exact_match))
        return None

    def refinement_clauses(self, criteria: FilterCriteria) -> list[Predicate]:
        """Build the filter panel clauses that are set.

        The year bounds target the numeric year column, separate from the
        date column used by metadata year lookups. Other values are compared
        as text, whatever type they were stored with.
        """
        clauses: list[Predicate] = []

        year_from = parse_year(criteria.year_from)
        year_to = parse_year(criteria.year_to)
        if year_from is not None or year_to is not None:
            clauses.append(Range(column=YEAR_COLUMN, gte=year_from, lte=year_to))

        language = _text(criteria.language)
        if language is not None:
            clauses.append(Eq(column=LANGUAGE_COLUMN, value=language))

        file_type = _text(criteria.file_type)
        if file_type is not None:
            clauses.append(format_clause(file_type))

        publisher = _text(criteria.publisher)
        if publisher is not None:
            clauses.append(ILike(column=PUBLISHER_COLUMN, value=publisher))

        genre = _text(criteria.genre)
        if genre is not None:
            clauses.append(genre_clause(genre))

        book_type = _text(criteria.book_type)
        if book_type is not None and book_type != ALL:
            clauses.append(Eq(column=TYPE_COLUMN, value=book_type))

        fiction_type = _text(criteria.fiction_type)
        if fiction_type is not None and fiction_type != ALL:
            clauses.append(Eq(column=FICTION_TYPE_COLUMN, value=fiction_type))

        return clauses

    def category_clause(self, categories: Iterable[Any]) -> Optional[Predicate]:
        """OR group with one containment check per category."""
        labels = [label for label in map(_text, categories) if label is not None]
        if not labels:
            return None
        return AnyOf(
            clauses=tuple(Contains(column=CATEGORIES_COLUMN, value=c) for c in labels)
        )
