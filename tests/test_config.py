"""Tests for configuration file loading."""

import pytest

from scanner.config import DepsListConfig, find_config_file, load_config, parse_config_data
from scanner.errors import ConfigError


class TestFindConfigFile:
    """Tests for configuration discovery."""

    def test_none(self, tmp_path):
        """Test a directory without configuration."""
        assert find_config_file(tmp_path) is None

    def test_yaml_preferred(self, tmp_path):
        """Test that a dedicated file wins over pyproject.toml."""
        (tmp_path / "pyproject.toml").write_text("[tool.depslist]\nresolve_depth = 1\n")
        (tmp_path / ".depslist.yml").write_text("resolve_depth: 2\n")

        assert find_config_file(tmp_path) == tmp_path / ".depslist.yml"

    def test_pyproject_requires_table(self, tmp_path):
        """Test that pyproject.toml is only used with a [tool.depslist] table."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.other]\nx = 1\n")

        assert find_config_file(tmp_path) is None

        pyproject.write_text("[tool.depslist]\nresolve_depth = 1\n")

        assert find_config_file(tmp_path) == pyproject


class TestLoadConfig:
    """Tests for loading YAML and TOML files."""

    def test_yaml(self, tmp_path):
        """Test a YAML configuration."""
        path = tmp_path / "depslist.yaml"
        path.write_text(
            "aliases:\n"
            "  '@app': src/app\n"
            "extensions: [.js, .mjs]\n"
            "resolve-depth: 2\n"
            "collect_packages: true\n"
        )

        config = load_config(path)

        assert config.source == path
        assert config.to_options() == {
            "aliases": {"@app": "src/app"},
            "extensions": [".js", ".mjs"],
            "resolve_depth": 2,
            "collect_packages": True,
        }

    def test_pyproject(self, tmp_path):
        """Test the [tool.depslist] table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text(
            "[project]\nname = 'x'\n\n"
            "[tool.depslist]\n"
            "track_mtime = false\n"
            "condition_names = ['require', 'node']\n"
        )

        config = load_config(path)

        assert config.to_options() == {
            "track_mtime": False,
            "condition_names": ["require", "node"],
        }

    def test_empty_yaml(self, tmp_path):
        """Test that an empty file gives an empty configuration."""
        path = tmp_path / "depslist.yaml"
        path.write_text("")

        assert load_config(path).to_options() == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "depslist.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that a syntax error is reported as a configuration error."""
        path = tmp_path / "depslist.yaml"
        path.write_text("aliases: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "depslist.ini"
        path.write_text("[x]\n")

        with pytest.raises(ConfigError):
            load_config(path)


class TestParseConfigData:
    """Tests for validation of configuration values."""

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            parse_config_data({"resolve_dpeth": 1})

    def test_wrong_types(self):
        """Test that values of the wrong type are rejected."""
        for data in (
            {"extensions": ".js"},
            {"track_mtime": "yes"},
            {"resolve_depth": True},
            {"aliases": "src"},
            {"modules": ["node_modules", 3]},
        ):
            with pytest.raises(ConfigError):
                parse_config_data(data)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            parse_config_data(["resolve_depth", 1])

    def test_defaults_are_unset(self):
        """Test that a fresh configuration sets no options."""
        assert DepsListConfig().to_options() == {}
