"""Navigation input helpers for bookworm.

Metadata deep links look like ``/search/<field>/<value>`` where the value has
its whitespace replaced by hyphens. A plain search carries a single
``query`` parameter instead.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, quote, unquote, urlsplit

from pydantic import BaseModel, ConfigDict

SEARCH_PREFIX = "search"

# Direction marks, line/paragraph separators and zero-width spaces that sneak
# in from copied metadata
_INVISIBLE_CHARS = re.compile("[\u200e\u200f\u2028\u2029\u200b]")

FIELD_LABELS: dict[str, str] = {
    "publisher": "Publisher",
    "narrator": "Narrator",
    "year": "Year",
    "format": "Format",
    "genre": "Genre",
    "language": "Language",
}


def sanitize_value(value: str) -> str:
    """Remove invisible marks and surrounding whitespace."""
    return _INVISIBLE_CHARS.sub("", value).strip()


def decode_path_value(raw: str) -> str:
    """Decode a metadata value taken from a URL path segment.

    Hyphens become spaces before percent-decoding, so an encoded hyphen
    (``%2D``) survives as a hyphen.
    """
    return sanitize_value(unquote(raw.replace("-", " ")))


def encode_path_value(value: str) -> str:
    """Build the URL path segment for a metadata value."""
    slug = re.sub(r"\s+", "-", sanitize_value(value))
    return quote(slug, safe="-")


def metadata_path(field: str, value: str) -> str:
    """Build the deep link path for a metadata lookup."""
    return f"/{SEARCH_PREFIX}/{field}/{encode_path_value(value)}"


def field_label(field: str) -> str:
    """Human-readable label for a metadata field."""
    label = FIELD_LABELS.get(field.lower())
    if label is not None:
        return label
    return field[:1].upper() + field[1:]


def display_value(field: str, value: str) -> str:
    """Format a metadata value for a page title.

    Formats are upper-cased, years and languages are shown as-is, and every
    other value gets each word capitalized.
    """
    name = field.lower()
    if name == "format":
        return value.upper()
    if name in ("year", "language"):
        return value
    return " ".join(word[:1].upper() + word[1:] for word in value.split(" "))


class NavigationRequest(BaseModel):
    """Values carried by a navigation.

    Attributes:
        field: Raw metadata field path segment, if any.
        value: Raw metadata value path segment (still encoded), if any.
        query: The free-text query parameter, if any.
    """

    model_config = ConfigDict(frozen=True)

    field: Optional[str] = None
    value: Optional[str] = None
    query: Optional[str] = None

    @property
    def has_metadata(self) -> bool:
        return self.field is not None or self.value is not None

    @classmethod
    def from_url(cls, url: str) -> "NavigationRequest":
        """Parse a URL or path such as ``/search/publisher/Penguin-Books?query=x``.

        Path segments after ``search`` become field and value. The ``query``
        parameter (or the shorter ``q``) becomes the query.
        """
        parts = urlsplit(url)
        segments = [s for s in parts.path.split("/") if s]
        if SEARCH_PREFIX in segments:
            segments = segments[segments.index(SEARCH_PREFIX) + 1:]
        else:
            segments = []

        params = parse_qs(parts.query)
        query_values = params.get("query") or params.get("q")

        return cls(
            field=segments[0] if len(segments) > 0 else None,
            value=segments[1] if len(segments) > 1 else None,
            query=query_values[0] if query_values else None,
        )
