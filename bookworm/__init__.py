"""Bookworm - search query compilation and pagination for book catalogs."""

__version__ = "0.1.0"
