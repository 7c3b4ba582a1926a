"""Main CLI module for bookworm.

This module re-exports the CLI for convenience. The main implementation
is in __main__.py.
"""

from bookworm.__main__ import cli

__all__ = ["cli"]
