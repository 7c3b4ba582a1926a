"""Book data model for bookworm.

Catalog plugins create Book instances. The engine itself works on plain row
mappings, so executors usually hold ``book.model_dump()`` output.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class Book(BaseModel):
    """A catalog item (e-book or audiobook).

    The columns match the ones the query compiler targets. Unknown keys in the
    source data are kept as extra fields.

    Attributes:
        id: Catalog identifier.
        title: Book title.
        author: Author name(s), comma separated.
        type: "ebook" or "audiobook".
        published_date: ISO date string used by metadata year lookups.
        published_year: Numeric year used by the year range filter. Derived
            from published_date when not given.
        categories: Category labels used for array containment.
        created_at: ISO timestamp used by the default sort.
    """

    model_config = ConfigDict(frozen=False, extra="allow")

    id: str
    title: str
    author: str = ""
    publisher: Optional[str] = None
    description: Optional[str] = None
    isbn: Optional[str] = None
    external_id: Optional[str] = None
    narrator: Optional[str] = None
    language: Optional[str] = None
    genre: Optional[str] = None
    categories: list[str] = []
    type: Optional[str] = None
    fiction_type: Optional[str] = None
    ebook_format: Optional[str] = None
    audio_format: Optional[str] = None
    file_size: Optional[str] = None
    published_date: Optional[str] = None
    published_year: Optional[int] = None
    created_at: Optional[str] = None

    @model_validator(mode="after")
    def derive_published_year(self) -> "Book":
        """Fill published_year from the leading year of published_date."""
        if self.published_year is None and self.published_date:
            head = self.published_date[:4]
            if head.isdigit():
                self.published_year = int(head)
        return self
