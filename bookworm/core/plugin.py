"""Plugin management for bookworm.

This module provides the PluginManager class that handles catalog plugin
discovery via Python entry points and registration with pluggy.
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import pluggy

from bookworm.core.errors import BookwormError
from bookworm.plugin import BookwormHookSpec, CatalogPlugin

if TYPE_CHECKING:
    from bookworm.models.book import Book

logger = logging.getLogger(__name__)

# Entry point group name for bookworm plugins
ENTRY_POINT_GROUP = "bookworm.plugins"


class PluginError(BookwormError):
    """Base exception for plugin-related errors."""


class PluginConflictError(PluginError):
    """Raised when multiple plugins both claim high confidence for a file."""


class NoPluginFoundError(PluginError):
    """Raised when no plugin can handle a file."""


class CatalogLoadError(PluginError):
    """Raised by a plugin when a catalog file cannot be loaded."""


class PluginManager:
    """Manages catalog plugin discovery and registration.

    Example:
        manager = PluginManager()
        manager.discover()  # Find and register entry point plugins
        manager.register(MyPlugin())  # Manually register a plugin

        name = manager.auto_detect(Path("catalog.json"))
        books = manager.get_plugin(name).load_catalog(Path("catalog.json"))
    """

    def __init__(self) -> None:
        """Initialize the plugin manager."""
        self.pm = pluggy.PluginManager("bookworm")
        self.pm.add_hookspecs(BookwormHookSpec)
        self._plugins: dict[str, CatalogPlugin] = {}

    def register(self, plugin: CatalogPlugin) -> None:
        """Register a plugin instance.

        Registering a second plugin under an existing name replaces it.
        """
        name = plugin.name
        if name in self._plugins:
            self.unregister(name)
        self._plugins[name] = plugin
        self.pm.register(plugin, name=name)

    def unregister(self, name: str) -> None:
        """Unregister a plugin by name."""
        if name in self._plugins:
            plugin = self._plugins.pop(name)
            self.pm.unregister(plugin)

    def discover(self) -> list[str]:
        """Discover and register plugins from entry points.

        Scans the 'bookworm.plugins' entry point group. Plugins that fail
        to load are logged and skipped.

        Returns:
            List of discovered plugin names.
        """
        discovered = []

        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                plugin_class = ep.load()
                plugin_instance = plugin_class()
            except Exception as e:
                logger.warning("Skipping plugin %s: %s", ep.name, e)
                continue
            self.register(plugin_instance)
            discovered.append(plugin_instance.name)

        return discovered

    def list_plugins(self) -> list[str]:
        """List all registered plugin names."""
        return list(self._plugins.keys())

    def get_plugin(self, name: str) -> CatalogPlugin | None:
        """Get a plugin by name, or None if not registered."""
        return self._plugins.get(name)

    def get_plugin_info(self, name: str) -> dict[str, str] | None:
        """Get name, version and description of a plugin.

        Returns:
            Dictionary with plugin info, or None if not found.
        """
        plugin = self._plugins.get(name)
        if plugin is None:
            return None

        return {
            "name": plugin.name,
            "version": getattr(plugin, "version", "0.0.0"),
            "description": getattr(plugin, "description", ""),
        }

    def auto_detect(self, path: Path) -> str:
        """Automatically detect the appropriate plugin for a catalog file.

        Calls `can_handle` on all registered plugins and selects the one with
        the highest confidence score.

        Returns:
            Name of the plugin with confidence >= 0.5.

        Raises:
            NoPluginFoundError: If no plugin has confidence >= 0.5.
            PluginConflictError: If multiple plugins have confidence >= 0.5.
        """
        if not self._plugins:
            raise NoPluginFoundError(
                f"No plugins registered. Cannot detect plugin for {path}"
            )

        scores: list[tuple[str, float]] = []
        for name, plugin in self._plugins.items():
            confidence = plugin.can_handle(path)
            if confidence is not None:
                scores.append((name, float(confidence)))

        if not scores:
            raise NoPluginFoundError(f"No plugin could analyze {path}")

        high_confidence = [(name, score) for name, score in scores if score >= 0.5]

        if not high_confidence:
            max_score = max(scores, key=lambda x: x[1])
            raise NoPluginFoundError(
                f"No plugin has confidence >= 0.5 for {path}. "
                f"Best match: {max_score[0]} with confidence {max_score[1]:.2f}"
            )

        if len(high_confidence) > 1:
            conflict_info = ", ".join(
                f"{name} ({score:.2f})" for name, score in high_confidence
            )
            raise PluginConflictError(
                f"Multiple plugins claim confidence >= 0.5 for {path}: {conflict_info}. "
                f"Use --plugin to specify which plugin to use."
            )

        return high_confidence[0][0]

    def load_catalog(self, path: Path, plugin_name: Optional[str] = None) -> list["Book"]:
        """Load a catalog with the named plugin, or the auto-detected one.

        Raises:
            NoPluginFoundError: If the named plugin is not registered or no
                plugin can handle the file.
            PluginConflictError: If detection is ambiguous.
            CatalogLoadError: If the plugin fails to read the file.
        """
        name = plugin_name or self.auto_detect(path)
        plugin = self.get_plugin(name)
        if plugin is None:
            raise NoPluginFoundError(f"Plugin '{name}' not found")
        books = plugin.load_catalog(path)
        logger.debug("Plugin %s loaded %d books from %s", name, len(books), path)
        return books
