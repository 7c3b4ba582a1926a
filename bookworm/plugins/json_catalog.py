"""JSON catalog plugin for bookworm.

Reads catalogs exported as JSON. Two layouts are accepted:
    catalog.json   → a list of book objects, or {"books": [...]}
    catalog.jsonl  → one book object per line
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bookworm.core.plugin import CatalogLoadError
from bookworm.models.book import Book
from bookworm.plugin import CatalogPlugin, hookimpl

_JSON_SUFFIXES = {".json"}
_JSONL_SUFFIXES = {".jsonl", ".ndjson"}


class JsonCatalogPlugin(CatalogPlugin):
    """Loader for JSON and JSON Lines catalog exports.

    Attributes:
        name: Plugin identifier ("json")
        version: Plugin version
        description: Human-readable description
    """

    name = "json"
    version = "1.0.0"
    description = "Loader for JSON and JSON Lines catalog exports"

    @hookimpl
    def can_handle(self, path: Path) -> float:
        """Check the file suffix and the first non-blank character.

        Returns:
            Confidence score (0.0 to 1.0).
        """
        if not path.exists():
            return 0.0

        suffix = path.suffix.lower()
        if suffix not in _JSON_SUFFIXES | _JSONL_SUFFIXES:
            return 0.0

        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                head = f.read(256).lstrip()
        except OSError:
            return 0.0

        if not head:
            # Empty file: plausibly an empty catalog
            return 0.5
        if head[0] in "[{":
            return 0.9
        return 0.0

    @hookimpl
    def load_catalog(self, path: Path) -> list[Book]:
        """Load books from a JSON or JSON Lines file.

        Raises:
            CatalogLoadError: If the file is missing, is not valid JSON, or
                holds an entry that is not a valid book.
        """
        if not path.exists():
            raise CatalogLoadError(f"Catalog file not found: {path}")

        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in _JSONL_SUFFIXES:
            entries = self._read_lines(text, path)
        else:
            entries = self._read_document(text, path)

        books: list[Book] = []
        for index, entry in enumerate(entries):
            try:
                books.append(Book.model_validate(entry))
            except ValidationError as e:
                raise CatalogLoadError(
                    f"Invalid book at entry {index} in {path}: {e}"
                ) from e
        return books

    def _read_document(self, text: str, path: Path) -> list[Any]:
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogLoadError(f"Invalid JSON in {path} at line {e.lineno}: {e.msg}") from e

        if isinstance(data, dict):
            data = data.get("books", [])
        if not isinstance(data, list):
            raise CatalogLoadError(f"Expected a list of books in {path}")
        return data

    def _read_lines(self, text: str, path: Path) -> list[Any]:
        entries = []
        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise CatalogLoadError(
                    f"Invalid JSON in {path} at line {line_number}: {e.msg}"
                ) from e
        return entries
