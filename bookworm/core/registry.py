"""Static lookup tables for the query compiler.

- Sort registry: sort key -> (column, direction)
- Field registry: metadata field name -> predicate builder

Field names are matched case-insensitively. Each registered field carries a
FieldKind tag and the builder for that kind produces its clause.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from bookworm.models.predicate import AnyOf, Contains, Eq, ILike, Predicate, Range
from bookworm.models.query import SortClause

# Columns searched by plain free text, in this order
SEARCH_COLUMNS: tuple[str, ...] = (
    "title",
    "author",
    "publisher",
    "description",
    "isbn",
    "external_id",
    "narrator",
)
FORMAT_COLUMNS: tuple[str, ...] = ("ebook_format", "audio_format")
DATE_COLUMN = "published_date"
YEAR_COLUMN = "published_year"
GENRE_COLUMN = "genre"
CATEGORIES_COLUMN = "categories"
LANGUAGE_COLUMN = "language"
PUBLISHER_COLUMN = "publisher"
TYPE_COLUMN = "type"
FICTION_TYPE_COLUMN = "fiction_type"
CREATED_COLUMN = "created_at"

# Field names the token parser picks out of free text
INLINE_TOKEN_FIELDS = frozenset(
    {"publisher", "year", "language", "format", "genre", "category", "narrator"}
)


class FieldKind(str, Enum):
    """How a metadata field turns a value into a predicate."""

    SUBSTRING = "substring"
    EXACT = "exact"
    YEAR = "year"
    FORMAT = "format"
    GENRE = "genre"


@dataclass(frozen=True)
class FieldSpec:
    """Registry entry for a metadata field."""

    name: str
    kind: FieldKind
    column: Optional[str] = None


METADATA_FIELDS: dict[str, FieldSpec] = {
    spec.name: spec
    for spec in (
        FieldSpec("publisher", FieldKind.SUBSTRING, "publisher"),
        FieldSpec("narrator", FieldKind.SUBSTRING, "narrator"),
        FieldSpec("author", FieldKind.SUBSTRING, "author"),
        FieldSpec("year", FieldKind.YEAR, DATE_COLUMN),
        FieldSpec("language", FieldKind.EXACT, LANGUAGE_COLUMN),
        FieldSpec("format", FieldKind.FORMAT),
        FieldSpec("genre", FieldKind.GENRE),
        FieldSpec("category", FieldKind.GENRE),
        FieldSpec("categories", FieldKind.GENRE),
        FieldSpec("fictiontype", FieldKind.EXACT, FICTION_TYPE_COLUMN),
        FieldSpec("isbn", FieldKind.EXACT, "isbn"),
        FieldSpec("external_id", FieldKind.EXACT, "external_id"),
    )
}

SORT_REGISTRY: dict[str, SortClause] = {
    # popularity has no counter column; it sorts like latest
    "popularity": SortClause(column=CREATED_COLUMN, direction="desc"),
    "latest": SortClause(column=CREATED_COLUMN, direction="desc"),
    "title_asc": SortClause(column="title", direction="asc"),
    "title_desc": SortClause(column="title", direction="desc"),
    "year": SortClause(column=DATE_COLUMN, direction="desc"),
}
DEFAULT_SORT = SortClause(column=CREATED_COLUMN, direction="desc")


def resolve_sort(key: Optional[str]) -> SortClause:
    """Look up the sort clause for a sort key.

    Unknown keys, including size_asc and size_desc which have no sortable
    size column, fall back to newest first.
    """
    if not isinstance(key, str):
        return DEFAULT_SORT
    return SORT_REGISTRY.get(key, DEFAULT_SORT)


def lookup_field(name: str) -> Optional[FieldSpec]:
    """Return the registry entry for a field name, ignoring case."""
    return METADATA_FIELDS.get(name.lower())


def is_metadata_field(name: Optional[str]) -> bool:
    """Check whether a field name has a predicate builder."""
    return bool(name) and lookup_field(name) is not None


def parse_year(value: Any) -> Optional[int]:
    """Coerce a year value to int, or None if it is not numeric.

    Accepts ints and digit strings (surrounding whitespace allowed).
    Booleans and anything else are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


def general_fallback(value: str, exact: bool = False) -> AnyOf:
    """Match ``value`` against every free-text column.

    Args:
        value: The search text.
        exact: Use equality instead of case-insensitive substring.
    """
    if exact:
        return AnyOf(clauses=tuple(Eq(column=c, value=value) for c in SEARCH_COLUMNS))
    return AnyOf(clauses=tuple(ILike(column=c, value=value) for c in SEARCH_COLUMNS))


def format_clause(value: str) -> AnyOf:
    """Substring match against either format column."""
    return AnyOf(clauses=tuple(ILike(column=c, value=value) for c in FORMAT_COLUMNS))


def genre_clause(value: str) -> AnyOf:
    """Substring match on the genre column, or membership in categories."""
    return AnyOf(
        clauses=(
            ILike(column=GENRE_COLUMN, value=value),
            Contains(column=CATEGORIES_COLUMN, value=value),
        )
    )


def _substring(spec: FieldSpec, value: str) -> Predicate:
    return ILike(column=spec.column, value=value)


def _exact(spec: FieldSpec, value: str) -> Predicate:
    return Eq(column=spec.column, value=value)


def _year(spec: FieldSpec, value: str) -> Optional[Predicate]:
    year = parse_year(value)
    if year is None:
        return None
    return Range(column=spec.column, gte=f"{year:04d}-01-01", lte=f"{year:04d}-12-31")


def _format(spec: FieldSpec, value: str) -> Predicate:
    return format_clause(value)


def _genre(spec: FieldSpec, value: str) -> Predicate:
    return genre_clause(value)


_BUILDERS: dict[FieldKind, Callable[[FieldSpec, str], Optional[Predicate]]] = {
    FieldKind.SUBSTRING: _substring,
    FieldKind.EXACT: _exact,
    FieldKind.YEAR: _year,
    FieldKind.FORMAT: _format,
    FieldKind.GENRE: _genre,
}


def build_field_clause(field: str, value: str) -> Optional[Predicate]:
    """Build the primary clause for a ``field:value`` pair.

    Unknown fields fall back to a substring search of every free-text column.

    Returns:
        The clause, or None when the value cannot be used (a non-numeric year).
    """
    spec = lookup_field(field)
    if spec is None:
        return general_fallback(value)
    return _BUILDERS[spec.kind](spec, value)
