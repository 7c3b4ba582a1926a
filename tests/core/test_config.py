"""Tests for bookworm configuration loading."""

import pytest

from bookworm.core.compiler import PAGE_SIZE
from bookworm.core.config import (
    CatalogSettings,
    Config,
    ConfigLoader,
    OutputSettings,
    SearchSettings,
    merge_tables,
)
from bookworm.core.errors import ConfigError
from bookworm.models.criteria import FilterCriteria


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Working directory and home directory with no config files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(home))
    return tmp_path


class TestConfigLoader:
    """Tests for ConfigLoader.load() method."""

    def test_load_basic_config(self, tmp_path):
        """Load a configuration file with catalog and output sections."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('''
[catalog]
default_plugin = "json"
collection = "audiobooks"

[output]
color = false
format = "json"
''')

        config = ConfigLoader().load(config_file)

        assert config.catalog.default_plugin == "json"
        assert config.catalog.collection == "audiobooks"
        assert config.output.color is False
        assert config.output.format == "json"

    def test_load_partial_config(self, tmp_path):
        """Missing sections and keys get defaults."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('''
[output]
format = "count"
''')

        config = ConfigLoader().load(config_file)

        assert config.output.format == "count"
        assert config.output.color is True
        assert config.catalog.default_plugin is None
        assert config.catalog.collection == "books"

    def test_load_empty_config(self, tmp_path):
        """An empty file gives the defaults."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("")

        assert ConfigLoader().load(config_file) == Config()

    def test_load_none(self):
        """Loading None gives the defaults."""
        config = ConfigLoader().load(None)

        assert config.output == OutputSettings()
        assert config.catalog == CatalogSettings()
        assert config.search == SearchSettings()
        assert config.output.format == "table"

    def test_nonexistent_file_raises_error(self, tmp_path):
        """Loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ConfigLoader().load(tmp_path / "nonexistent.toml")


class TestMalformedTOML:
    """Tests for error handling with malformed TOML."""

    def test_error_has_line_number(self, tmp_path):
        """Malformed TOML reports the line."""
        bad_config = tmp_path / "bad.toml"
        bad_config.write_text('[catalog]\ncollection = "books"\ncolor = not_a_value\n')

        with pytest.raises(ConfigError) as exc:
            ConfigLoader().load(bad_config)

        assert exc.value.line == 3
        assert "line 3" in str(exc.value)

    def test_error_includes_file_path(self, tmp_path):
        """The message names the file."""
        bad_config = tmp_path / "bad.toml"
        bad_config.write_text("[catalog\n")

        with pytest.raises(ConfigError) as exc:
            ConfigLoader().load(bad_config)

        assert exc.value.path == bad_config
        assert str(bad_config) in str(exc.value)

    def test_message_without_location(self):
        """A ConfigError without line or path is just the message."""
        assert str(ConfigError("bad value")) == "bad value"


class TestDiscovery:
    """Tests for discover_configs() and load_merged()."""

    def test_no_configs(self, isolated):
        """Nothing found, defaults used."""
        loader = ConfigLoader()

        assert loader.discover_configs(isolated) == []
        assert loader.load_merged(isolated) == Config()

    def test_local_config(self, isolated):
        """bookworm.toml in the start directory is found."""
        (isolated / "bookworm.toml").write_text('[output]\nformat = "json"\n')

        configs = ConfigLoader().discover_configs(isolated)

        assert configs == [isolated / "bookworm.toml"]

    def test_user_config(self, isolated):
        """~/.config/bookworm/config.toml is found."""
        user_dir = isolated / "home" / ".config" / "bookworm"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text("[output]\ncolor = false\n")

        configs = ConfigLoader().discover_configs(isolated)

        assert configs == [user_dir / "config.toml"]

    def test_local_overrides_user(self, isolated):
        """The local file wins per key; other user keys fall through."""
        user_dir = isolated / "home" / ".config" / "bookworm"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text(
            '[output]\ncolor = false\nformat = "json"\n\n[catalog]\ndefault_plugin = "json"\n'
        )
        (isolated / "bookworm.toml").write_text('[output]\nformat = "count"\n')

        config = ConfigLoader().load_merged(isolated)

        assert config.output.format == "count"
        assert config.output.color is False
        assert config.catalog.default_plugin == "json"

    def test_defaults_to_working_directory(self, isolated):
        """Without a start path the working directory is searched."""
        (isolated / "bookworm.toml").write_text('[catalog]\ncollection = "ebooks"\n')

        assert ConfigLoader().load_merged().catalog.collection == "ebooks"

    def test_bad_discovered_file_raises(self, isolated):
        """A malformed discovered file raises ConfigError."""
        (isolated / "bookworm.toml").write_text("[output\n")

        with pytest.raises(ConfigError):
            ConfigLoader().load_merged(isolated)


class TestSearchSettings:
    """Tests for the [search] table."""

    def test_defaults(self):
        """Without a [search] table the engine defaults apply."""
        settings = Config().search

        assert settings.page_size == PAGE_SIZE
        assert settings.default_criteria() == FilterCriteria()

    def test_search_table(self, tmp_path):
        """page_size, sort_by and exact_match are read from the file."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('[search]\npage_size = 50\nsort_by = "title_asc"\nexact_match = true\n')

        settings = ConfigLoader().load(config_file).search

        assert settings.page_size == 50
        assert settings.default_criteria() == FilterCriteria(sort_by="title_asc", exact_match=True)

    @pytest.mark.parametrize(
        "content, location",
        [
            ("[search]\npage_size = 0\n", "search.page_size"),
            ('[search]\nsort_by = "random"\n', "search.sort_by"),
            ('[output]\nformat = "xml"\n', "output.format"),
        ],
    )
    def test_bad_values_raise(self, tmp_path, content, location):
        """Values of the wrong kind raise ConfigError naming the key."""
        config_file = tmp_path / "config.toml"
        config_file.write_text(content)

        with pytest.raises(ConfigError) as exc:
            ConfigLoader().load(config_file)

        assert location in str(exc.value)
        assert exc.value.path == config_file
        assert exc.value.line is None

    def test_unknown_keys_ignored(self, tmp_path):
        """Tables and keys bookworm does not use are ignored."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[tui]\ntheme = \"dark\"\n\n[output]\nwidth = 80\n")

        assert ConfigLoader().load(config_file) == Config()

    def test_merged_search_settings(self, isolated):
        """A local page_size keeps the user's sort_by."""
        user_dir = isolated / "home" / ".config" / "bookworm"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text('[search]\nsort_by = "latest"\npage_size = 10\n')
        (isolated / "bookworm.toml").write_text("[search]\npage_size = 30\n")

        settings = ConfigLoader().load_merged(isolated).search

        assert settings.page_size == 30
        assert settings.sort_by == "latest"


class TestMergeTables:
    """Tests for merge_tables()."""

    def test_nested_merge(self):
        merged = merge_tables(
            {"output": {"color": False, "format": "json"}},
            {"output": {"format": "count"}, "catalog": {"collection": "x"}},
        )

        assert merged == {
            "output": {"color": False, "format": "count"},
            "catalog": {"collection": "x"},
        }

    def test_inputs_unchanged(self):
        base = {"output": {"color": False}}
        merge_tables(base, {"output": {"color": True}})

        assert base == {"output": {"color": False}}

    def test_table_replaced_by_value(self):
        """A non-table value replaces a table."""
        assert merge_tables({"search": {"page_size": 5}}, {"search": 1}) == {"search": 1}
