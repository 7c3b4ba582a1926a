"""Core logic for bookworm.

This module provides the core functionality:
- Token parsing of field:value qualifiers in free text
- FilterStateStore: owner of the filter criteria
- QueryCompiler: criteria to predicate, sort and page window
- SearchSession: navigation and interactive input to fetches
- ResultAccumulator: page replace/append and has-more tracking
- InMemoryExecutor: reference query executor
- ConfigLoader and PluginManager
"""

from bookworm.core.compiler import PAGE_SIZE, QueryCompiler
from bookworm.core.config import (
    CatalogSettings,
    Config,
    ConfigLoader,
    OutputSettings,
    SearchSettings,
)
from bookworm.core.errors import (
    BookwormError,
    ConfigError,
    ExecutorError,
    InputError,
    UnknownFilterError,
)
from bookworm.core.executor import InMemoryExecutor, QueryExecutor
from bookworm.core.navigation import NavigationRequest
from bookworm.core.pagination import ResultAccumulator
from bookworm.core.plugin import (
    CatalogLoadError,
    NoPluginFoundError,
    PluginConflictError,
    PluginError,
    PluginManager,
)
from bookworm.core.store import FilterStateStore
from bookworm.core.sync import FetchState, SearchSession
from bookworm.core.tokens import ParsedQuery, apply_tokens, parse_tokens

__all__ = [
    "BookwormError",
    "CatalogSettings",
    "CatalogLoadError",
    "Config",
    "ConfigError",
    "ConfigLoader",
    "ExecutorError",
    "FetchState",
    "FilterStateStore",
    "InMemoryExecutor",
    "InputError",
    "NavigationRequest",
    "NoPluginFoundError",
    "OutputSettings",
    "PAGE_SIZE",
    "ParsedQuery",
    "PluginConflictError",
    "PluginError",
    "PluginManager",
    "QueryCompiler",
    "QueryExecutor",
    "ResultAccumulator",
    "SearchSession",
    "SearchSettings",
    "UnknownFilterError",
    "apply_tokens",
    "parse_tokens",
]
