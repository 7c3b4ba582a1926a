"""Hook specifications for bookworm catalog plugins.

Catalog plugins turn catalog files into Book rows that the in-memory
executor can search. Plugins use the @hookimpl decorator to register their
implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from bookworm.models.book import Book

hookspec = pluggy.HookspecMarker("bookworm")


class BookwormHookSpec:
    """Hook specification defining the catalog plugin interface."""

    @hookspec
    def can_handle(self, path: Path) -> float:
        """Determine if this plugin can load the given catalog file.

        Args:
            path: Path to the catalog file to check.

        Returns:
            Confidence score from 0.0 to 1.0:
            - 0.0: Cannot handle this file
            - 0.5: Might be able to handle (ambiguous)
            - 1.0: Definitely can handle this file

            The plugin with the highest confidence score will be selected.
            If no plugin has confidence >= 0.5, an error is raised.
        """

    @hookspec
    def load_catalog(self, path: Path) -> list["Book"]:
        """Load the catalog file into books.

        Args:
            path: Path to the catalog file.

        Returns:
            List of Book objects in file order.

        Raises:
            CatalogLoadError: If the file cannot be read or parsed.
        """
