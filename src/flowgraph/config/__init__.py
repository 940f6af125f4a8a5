"""
flowgraph.config - Configuration loading and defaults

Configuration comes from three layers, later layers winning:

1. DEFAULT_CONFIG
2. The nearest .flowgraph.toml (current directory or a parent)
3. FLOWGRAPH_<SECTION>_<KEY> environment variables
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from flowgraph.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG, ENV_PREFIX

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


def find_config_file(start: Path) -> Path | None:
    """Find the nearest configuration file.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to .flowgraph.toml, or None if no directory up to the
        filesystem root contains one.
    """
    current = Path(start).resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested tables are merged key by key; any other value replaces the
    base value outright.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """Convert an environment variable string into a typed value.

    - "true"/"false" (any case) become booleans
    - integers become int
    - JSON arrays/objects are decoded; malformed JSON stays a string
    - anything else is returned as-is
    """
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply FLOWGRAPH_<SECTION>_<KEY> environment variables.

    Only sections already present in ``config`` are considered; the key
    is everything after the section name, lowercased.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        rest = name[len(ENV_PREFIX) :].lower()
        for section, table in config.items():
            prefix = f"{section}_"
            if isinstance(table, dict) and rest.startswith(prefix) and len(rest) > len(prefix):
                table[rest[len(prefix) :]] = _try_parse_env_value(raw)
                logger.debug("Config override from %s", name)
                break
    return config


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration.

    Args:
        config_path: Explicit config file. When None, the nearest
            .flowgraph.toml above the current directory is used, if any.

    Returns:
        Merged configuration dictionary.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    if config_path is None:
        config_path = find_config_file(Path.cwd())

    user_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            user_config = tomlkit.parse(Path(config_path).read_text(encoding="utf-8")).unwrap()
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e
        except ParseError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
        logger.debug("Loaded configuration from %s", config_path)

    return _apply_env_overrides(merge_configs(DEFAULT_CONFIG, user_config))


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG",
    "find_config_file",
    "load_config",
    "merge_configs",
]
