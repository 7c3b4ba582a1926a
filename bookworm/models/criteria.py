"""FilterCriteria data model for bookworm.

This model holds the filter panel and search box state that the query
compiler turns into a predicate.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

BookType = Literal["all", "ebook", "audiobook"]
SortKey = Literal[
    "popularity",
    "latest",
    "title_asc",
    "title_desc",
    "year",
    "size_asc",
    "size_desc",
]

# Reserved filter value meaning "no constraint"
ALL = "all"


class FilterCriteria(BaseModel):
    """The canonical filter state of a search session.

    Instances are immutable. The FilterStateStore replaces the whole
    snapshot on every change, so a reader never sees a half-updated value.

    Values are not validated when a field is replaced: a year typed into a
    form may arrive as text, and the compiler drops it if it is not numeric.

    Attributes:
        query: Free text from the search box (may contain field:value tokens).
        year_from: Lower bound on the published year.
        year_to: Upper bound on the published year. Not checked against
            year_from; each bound is compiled on its own.
        language: Exact language name.
        file_type: File format matched against ebook and audio formats.
        publisher: Publisher substring, set from publisher: tokens.
        genre: Genre or category, set from genre: and category: tokens;
            matched against the genre column and the categories array.
        book_type: "ebook", "audiobook" or the "all" sentinel.
        fiction_type: Fiction category, None or the "all" sentinel.
        exact_match: Use equality instead of substring for free text.
        sort_by: Sort key resolved through the sort registry.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    query: str = ""
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    language: Optional[str] = None
    file_type: Optional[str] = None
    publisher: Optional[str] = None
    genre: Optional[str] = None
    book_type: BookType = ALL
    fiction_type: Optional[str] = None
    exact_match: bool = False
    sort_by: SortKey = "popularity"


DEFAULT_CRITERIA = FilterCriteria()


def resolve_field_name(key: str) -> str | None:
    """Map a field name or its camelCase alias to the model field name.

    Args:
        key: Field name such as "year_from" or "yearFrom".

    Returns:
        The model field name, or None if the key names no field.
    """
    if key in FilterCriteria.model_fields:
        return key
    for name, info in FilterCriteria.model_fields.items():
        if info.alias == key:
            return name
    return None
