"""TOML configuration for bookworm.

Settings come from up to two files, merged table by table over the
defaults:

    ~/.config/bookworm/config.toml    user settings
    ./bookworm.toml                   project settings (wins)

Command line options override both. Example file:

    [catalog]
    default_plugin = "json"
    collection = "books"

    [search]
    page_size = 20
    sort_by = "latest"
    exact_match = false

    [output]
    color = true
    format = "table"
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Literal, Optional

import tomli
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bookworm.core.compiler import PAGE_SIZE
from bookworm.core.errors import ConfigError
from bookworm.models.criteria import FilterCriteria, SortKey

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "bookworm.toml"
USER_CONFIG = Path(".config") / "bookworm" / "config.toml"

_LINE_NUMBER = re.compile(r"\bline (\d+)", re.IGNORECASE)


class CatalogSettings(BaseModel):
    """The [catalog] table.

    Attributes:
        default_plugin: Plugin used when --plugin is not given; None means
            auto-detect from the file.
        collection: Collection name the catalog rows are served under.
    """

    model_config = ConfigDict(frozen=True)

    default_plugin: Optional[str] = None
    collection: str = "books"


class SearchSettings(BaseModel):
    """The [search] table: defaults for every search session."""

    model_config = ConfigDict(frozen=True)

    page_size: int = Field(default=PAGE_SIZE, ge=1)
    sort_by: SortKey = "popularity"
    exact_match: bool = False

    def default_criteria(self) -> FilterCriteria:
        """Criteria a session starts from and resets to."""
        return FilterCriteria(sort_by=self.sort_by, exact_match=self.exact_match)


class OutputSettings(BaseModel):
    """The [output] table."""

    model_config = ConfigDict(frozen=True)

    color: bool = True
    format: Literal["table", "json", "count"] = "table"


class Config(BaseModel):
    """Complete bookworm configuration. Unknown tables and keys are ignored."""

    model_config = ConfigDict(frozen=True)

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)


def merge_tables(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge ``overlay`` over ``base``, table by table.

    Nested tables merge key by key; any other value in ``overlay``
    replaces the one in ``base``. Neither argument is modified.
    """
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_tables(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Finds, parses and validates bookworm config files.

    Example usage:
        loader = ConfigLoader()
        config = loader.load(Path("bookworm.toml"))
        config = loader.load_merged()   # user file, then ./bookworm.toml
    """

    def load(self, path: Optional[Path]) -> Config:
        """Load one config file.

        Args:
            path: TOML file to read, or None for the defaults.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            ConfigError: If the file is not valid TOML or holds bad values.
        """
        if path is None:
            return Config()
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        return self._validate(self._parse(path), path)

    def discover_configs(self, start_path: Optional[Path] = None) -> list[Path]:
        """Return the existing config files, lowest precedence first.

        Args:
            start_path: Directory searched for bookworm.toml; defaults to
                the working directory.
        """
        directory = Path(start_path).resolve() if start_path is not None else Path.cwd()
        candidates = (Path.home() / USER_CONFIG, directory / CONFIG_FILENAME)

        found: list[Path] = []
        for candidate in candidates:
            if not candidate.is_file():
                continue
            # The home directory may be the start directory too
            if any(candidate.resolve() == seen.resolve() for seen in found):
                continue
            found.append(candidate)
        return found

    def load_merged(self, start_path: Optional[Path] = None) -> Config:
        """Merge every discovered config file over the defaults.

        Raises:
            ConfigError: If any discovered file is invalid.
        """
        data: dict[str, Any] = {}
        last: Optional[Path] = None
        for path in self.discover_configs(start_path):
            logger.debug("Reading config %s", path)
            data = merge_tables(data, self._parse(path))
            last = path
        return self._validate(data, last)

    def _parse(self, path: Path) -> dict[str, Any]:
        try:
            with path.open("rb") as f:
                return tomli.load(f)
        except tomli.TOMLDecodeError as e:
            match = _LINE_NUMBER.search(str(e))
            line = int(match.group(1)) if match else None
            raise ConfigError(str(e), line=line, path=path) from e

    @staticmethod
    def _validate(data: dict[str, Any], path: Optional[Path]) -> Config:
        try:
            return Config.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigError(problems, path=path) from e
