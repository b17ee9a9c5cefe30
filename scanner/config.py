"""Loading of depslist options from YAML or pyproject.toml files."""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

try:
    import tomllib
except ImportError:
    import toml as tomllib  # type: ignore

from .errors import ConfigError


logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "depslist.yaml",
    "depslist.yml",
    ".depslist.yaml",
    ".depslist.yml",
)

PYPROJECT = "pyproject.toml"
TOOL_TABLE = "depslist"


@dataclass
class DepsListConfig:
    """Options read from a configuration file. None means "not set"."""

    aliases: Optional[Any] = None
    extensions: Optional[List[str]] = None
    resolve_depth: Optional[int] = None
    track_mtime: Optional[bool] = None
    collect_packages: Optional[bool] = None
    condition_names: Optional[List[str]] = None
    main_fields: Optional[List[str]] = None
    modules: Optional[List[str]] = None
    max_open_files: Optional[int] = None
    source: Optional[Path] = field(default=None, compare=False)

    def to_options(self) -> Dict[str, Any]:
        """Return the options that were set, as keyword arguments for ``deps_list``."""
        options: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "source":
                continue
            value = getattr(self, f.name)
            if value is not None:
                options[f.name] = value
        return options


_LIST_KEYS = {"extensions", "condition_names", "main_fields", "modules"}
_BOOL_KEYS = {"track_mtime", "collect_packages"}
_INT_KEYS = {"resolve_depth", "max_open_files"}


def find_config_file(directory: Path) -> Optional[Path]:
    """
    Find a configuration file in ``directory``.

    Dedicated depslist files win over a ``[tool.depslist]`` table in
    ``pyproject.toml``.

    Returns:
        Path of the configuration file, or None if there is none.
    """
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate

    pyproject = directory / PYPROJECT
    if pyproject.is_file() and _has_tool_table(pyproject):
        return pyproject
    return None


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable %s: %s", pyproject, e)
        return False
    return TOOL_TABLE in data.get("tool", {})


def load_config(config_path: Path) -> DepsListConfig:
    """
    Load a YAML or TOML configuration file.

    Args:
        config_path: Path to ``*.yaml``/``*.yml`` or ``*.toml``.

    Returns:
        Parsed configuration.

    Raises:
        ConfigError: If the file is missing, malformed or has unknown keys.
    """
    if not config_path.is_file():
        raise ConfigError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(content)
        elif suffix == ".toml":
            data = tomllib.loads(content)
            if config_path.name == PYPROJECT:
                data = data.get("tool", {}).get(TOOL_TABLE, {})
        else:
            raise ConfigError(f"Unsupported configuration format: {suffix}")
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"Invalid configuration file {config_path}: {e}") from e

    config = parse_config_data(data or {})
    config.source = config_path
    logger.debug("Loaded configuration from %s", config_path)
    return config


def parse_config_data(data: Any) -> DepsListConfig:
    """Validate raw configuration data and build a DepsListConfig."""
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

    config = DepsListConfig()
    for raw_key, value in data.items():
        key = str(raw_key).replace("-", "_")

        if key == "aliases":
            if not isinstance(value, (dict, list)):
                raise ConfigError("'aliases' must be a mapping or a list of rules")
        elif key in _LIST_KEYS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'{raw_key}' must be a list of strings")
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                raise ConfigError(f"'{raw_key}' must be true or false")
        elif key in _INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"'{raw_key}' must be an integer")
        else:
            raise ConfigError(f"Unknown configuration key: {raw_key}")

        setattr(config, key, value)

    return config
