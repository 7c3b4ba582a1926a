"""Plugin system for bookworm.

Catalog plugins load catalog files into Book rows. They implement the hooks
defined in hookspec.py.

Usage:
    from bookworm.plugin import CatalogPlugin, hookimpl

    class CsvCatalogPlugin(CatalogPlugin):
        name = "csv"

        @hookimpl
        def can_handle(self, path):
            return 0.9 if path.suffix == ".csv" else 0.0

        @hookimpl
        def load_catalog(self, path):
            return [...]
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

from bookworm.plugin.hookspec import BookwormHookSpec

if TYPE_CHECKING:
    from bookworm.models.book import Book

hookimpl = pluggy.HookimplMarker("bookworm")

__all__ = ["BookwormHookSpec", "CatalogPlugin", "hookimpl"]


class CatalogPlugin:
    """Base class for bookworm catalog plugins.

    Subclasses must define:
        name: Unique identifier for the plugin (str)

    Optional attributes:
        version: Plugin version string (str)
        description: Human-readable description (str)
    """

    name: str = "base"
    version: str = "0.0.0"
    description: str = ""

    @hookimpl
    def can_handle(self, path: Path) -> float:
        """Default implementation: cannot handle any files."""
        return 0.0

    @hookimpl
    def load_catalog(self, path: Path) -> list["Book"]:
        """Default implementation: an empty catalog."""
        return []
