"""Built-in catalog plugins for bookworm."""

from bookworm.plugins.json_catalog import JsonCatalogPlugin

BUILTIN_PLUGINS = (JsonCatalogPlugin,)

__all__ = ["BUILTIN_PLUGINS", "JsonCatalogPlugin"]
