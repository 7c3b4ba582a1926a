"""Data models for bookworm."""

from bookworm.models.book import Book
from bookworm.models.criteria import (
    ALL,
    DEFAULT_CRITERIA,
    BookType,
    FilterCriteria,
    SortKey,
    resolve_field_name,
)
from bookworm.models.predicate import AllOf, AnyOf, Contains, Eq, ILike, Predicate, Range
from bookworm.models.query import (
    CompiledQuery,
    MetadataOverride,
    QueryToken,
    ResultPage,
    SearchView,
    SortClause,
)

__all__ = [
    "ALL",
    "AllOf",
    "AnyOf",
    "Book",
    "BookType",
    "CompiledQuery",
    "Contains",
    "DEFAULT_CRITERIA",
    "Eq",
    "FilterCriteria",
    "ILike",
    "MetadataOverride",
    "Predicate",
    "QueryToken",
    "Range",
    "ResultPage",
    "SearchView",
    "SortClause",
    "SortKey",
    "resolve_field_name",
]
