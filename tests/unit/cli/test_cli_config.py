"""Unit tests for appvinspect CLI configuration management.

This module tests configuration file discovery, loading and priority
handling.
"""

import argparse
import json
from unittest.mock import patch

import pytest

from appvinspect.cli.config import (
    config_to_defaults,
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
)


@pytest.mark.unit
@pytest.mark.cli
class TestConfigDiscovery:
    """Test configuration file discovery functionality."""

    def test_discover_in_start_dir(self, temp_dir):
        """A dotfile in the start directory is found."""
        config_file = temp_dir / ".appvinspect.toml"
        config_file.write_text("detailed = true\n")

        assert find_config_in_parents(temp_dir) == config_file.resolve()

    def test_discover_in_parent(self, temp_dir):
        """The search walks up through parent directories."""
        config_file = temp_dir / ".appvinspect.yaml"
        config_file.write_text("detailed: true\n")
        nested = temp_dir / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_in_parents(nested) == config_file.resolve()

    def test_toml_preferred_over_json(self, temp_dir):
        """Within one directory TOML is checked before JSON."""
        (temp_dir / ".appvinspect.json").write_text("{}")
        toml_file = temp_dir / ".appvinspect.toml"
        toml_file.write_text("")

        assert find_config_in_parents(temp_dir) == toml_file.resolve()

    def test_pyproject_with_section(self, temp_dir):
        """A pyproject.toml with a [tool.appvinspect] table counts as a config file."""
        pyproject = temp_dir / "pyproject.toml"
        pyproject.write_text('[project]\nname = "x"\n\n[tool.appvinspect]\ndetailed = true\n')

        assert find_config_in_parents(temp_dir) == pyproject.resolve()

    def test_pyproject_without_section_skipped(self, temp_dir):
        """A pyproject.toml without the table is ignored."""
        pyproject = temp_dir / "pyproject.toml"
        pyproject.write_text('[project]\nname = "x"\n')

        assert find_config_in_parents(temp_dir) != pyproject.resolve()

    def test_home_directory_fallback(self, temp_dir):
        """The home directory is checked after the parent walk."""
        home = temp_dir / "home"
        home.mkdir()
        config_file = home / ".appvinspect.json"
        config_file.write_text("{}")

        with patch("appvinspect.cli.config.find_config_in_parents", return_value=None):
            with patch("appvinspect.cli.config.Path.home", return_value=home):
                assert discover_config_file(temp_dir) == config_file


@pytest.mark.unit
@pytest.mark.cli
class TestConfigLoading:
    """Test loading configuration files of each format."""

    def test_load_toml(self, temp_dir):
        """TOML files load into a dict."""
        config_file = temp_dir / "config.toml"
        config_file.write_text('detailed = true\ntitle = "Audit"\n')

        assert load_config_file(config_file) == {"detailed": True, "title": "Audit"}

    def test_load_yaml(self, temp_dir):
        """YAML files load into a dict."""
        config_file = temp_dir / "config.yml"
        config_file.write_text("detailed: true\nlog_level: info\n")

        assert load_config_file(config_file) == {"detailed": True, "log_level": "info"}

    def test_load_json(self, temp_dir):
        """JSON files load into a dict."""
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({"overwrite": True}))

        assert load_config_file(str(config_file)) == {"overwrite": True}

    def test_load_pyproject_section(self, temp_dir):
        """pyproject.toml yields only the tool table."""
        pyproject = temp_dir / "pyproject.toml"
        pyproject.write_text('[tool.appvinspect]\ncss = "corp.css"\n\n[tool.other]\nx = 1\n')

        assert load_config_file(pyproject) == {"css": "corp.css"}

    def test_empty_yaml_is_empty_config(self, temp_dir):
        """An empty YAML document is an empty configuration."""
        config_file = temp_dir / "config.yaml"
        config_file.write_text("")

        assert load_config_file(config_file) == {}

    def test_missing_file(self, temp_dir):
        """A missing file raises ArgumentTypeError."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(temp_dir / "missing.toml")

    def test_unsupported_extension(self, temp_dir):
        """Unknown extensions are rejected."""
        config_file = temp_dir / "config.ini"
        config_file.write_text("[x]\n")

        with pytest.raises(argparse.ArgumentTypeError, match="Unsupported config file format"):
            load_config_file(config_file)

    def test_invalid_toml(self, temp_dir):
        """Syntax errors are reported as ArgumentTypeError."""
        config_file = temp_dir / "config.toml"
        config_file.write_text("detailed = = true")

        with pytest.raises(argparse.ArgumentTypeError, match="Invalid configuration"):
            load_config_file(config_file)

    def test_non_mapping_root(self, temp_dir):
        """A list at the root is rejected."""
        config_file = temp_dir / "config.json"
        config_file.write_text("[1, 2]")

        with pytest.raises(argparse.ArgumentTypeError, match="must contain a mapping"):
            load_config_file(config_file)


@pytest.mark.unit
@pytest.mark.cli
class TestConfigPriority:
    """Test configuration source priority."""

    def test_explicit_path_wins(self, temp_dir):
        """An explicit path beats the environment variable path."""
        explicit = temp_dir / "explicit.json"
        explicit.write_text('{"title": "explicit"}')
        from_env = temp_dir / "env.json"
        from_env.write_text('{"title": "env"}')

        assert load_config_with_priority(str(explicit), str(from_env)) == {"title": "explicit"}

    def test_env_path_used(self, temp_dir):
        """The environment variable path is used without an explicit path."""
        from_env = temp_dir / "env.json"
        from_env.write_text('{"title": "env"}')

        assert load_config_with_priority(None, str(from_env)) == {"title": "env"}

    def test_discovered_file_used(self, temp_dir):
        """Without explicit paths the discovered file is loaded."""
        discovered = temp_dir / ".appvinspect.json"
        discovered.write_text('{"title": "found"}')

        with patch("appvinspect.cli.config.discover_config_file", return_value=discovered):
            assert load_config_with_priority() == {"title": "found"}

    def test_nothing_found(self):
        """No configuration anywhere yields an empty dict."""
        with patch("appvinspect.cli.config.discover_config_file", return_value=None):
            assert load_config_with_priority() == {}


@pytest.mark.unit
@pytest.mark.cli
class TestConfigToDefaults:
    """Test mapping configuration keys onto argument destinations."""

    def test_known_keys(self):
        """Known keys map to argparse destinations; dashes are accepted."""
        defaults = config_to_defaults({"detailed": True, "output-dir": "reports", "log_level": "debug"})

        assert defaults == {"detailed": True, "output_dir": "reports", "log_level": "debug"}

    def test_unknown_keys_dropped(self, caplog):
        """Unknown keys are dropped with a warning."""
        defaults = config_to_defaults({"detailed": True, "colour": "blue"})

        assert defaults == {"detailed": True}
        assert "colour" in caplog.text

