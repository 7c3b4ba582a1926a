"""Search box token parser for bookworm.

Picks inline field qualifiers out of free text:
    publisher:"Penguin Random House"   → quoted value (may contain spaces)
    year:1999                          → unquoted value (runs to whitespace)
    plain text                         → left alone

The text itself is never modified; tokens are extra information on top of
it. Field names are case-insensitive. Tokens whose field is not one of the
inline fields are dropped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from bookworm.core.registry import INLINE_TOKEN_FIELDS, parse_year
from bookworm.models.query import QueryToken

if TYPE_CHECKING:
    from bookworm.core.store import FilterStateStore

logger = logging.getLogger(__name__)

# field:"quoted value" or field:value; \" inside quotes does not end the value
TOKEN_PATTERN = re.compile(r'(\w+):(?:"((?:[^"\\]|\\.)*)"|(\S+))')

# A single token spanning the whole input
WHOLE_TOKEN_PATTERN = re.compile(r'^\s*(\w+):(?:"((?:[^"\\]|\\.)*)"|(\S+))\s*$')


@dataclass
class ParsedQuery:
    """Tokens found in a search string.

    Attributes:
        tokens: Recognized field:value tokens in input order.
        text: The input text, unmodified.
    """

    tokens: list[QueryToken] = field(default_factory=list)
    text: str = ""


def _token_from_match(match: re.Match[str]) -> QueryToken:
    name, quoted, bare = match.group(1), match.group(2), match.group(3)
    if quoted is not None:
        value = re.sub(r"\\(.)", r"\1", quoted)
    else:
        value = bare
    return QueryToken(field=name.lower(), value=value)


def parse_tokens(text: str) -> ParsedQuery:
    """Parse search box text into field:value tokens.

    Args:
        text: Raw search box input.

    Returns:
        ParsedQuery with the recognized tokens and the untouched text.
    """
    if not text or not text.strip():
        return ParsedQuery(text=text or "")

    tokens: list[QueryToken] = []
    for match in TOKEN_PATTERN.finditer(text):
        token = _token_from_match(match)
        if token.field in INLINE_TOKEN_FIELDS:
            tokens.append(token)
        else:
            logger.debug("Dropping token with unrecognized field %r", token.field)

    return ParsedQuery(tokens=tokens, text=text)


def parse_whole_token(text: str) -> Optional[QueryToken]:
    """Parse text that consists of exactly one field:value token.

    Any field name is accepted here; the compiler decides what it means.

    Returns:
        The token, or None if the text is not a single token.
    """
    if not text:
        return None
    match = WHOLE_TOKEN_PATTERN.match(text)
    if match is None:
        return None
    return _token_from_match(match)


def apply_tokens(store: FilterStateStore, tokens: list[QueryToken]) -> dict[str, object]:
    """Apply parsed tokens to the filter state.

    Mapping:
        year      → year_from and year_to
        language  → language
        format    → file_type
        genre, category → genre
        publisher → publisher
        narrator  → nothing (no narrator filter exists)

    Args:
        store: The store holding the criteria to update.
        tokens: Tokens from parse_tokens().

    Returns:
        The field updates that were applied.
    """
    updates: dict[str, object] = {}
    for token in tokens:
        if token.field == "year":
            year = parse_year(token.value)
            updates["year_from"] = token.value if year is None else year
            updates["year_to"] = token.value if year is None else year
        elif token.field == "language":
            updates["language"] = token.value
        elif token.field == "format":
            updates["file_type"] = token.value
        elif token.field in ("genre", "category"):
            updates["genre"] = token.value
        elif token.field == "publisher":
            updates["publisher"] = token.value
        elif token.field == "narrator":
            logger.info("narrator:%s is not wired to a filter; ignoring", token.value)

    if updates:
        store.update_many(updates)
    return updates
