"""
diagdoc.config.loader - Configuration file discovery and loading.

Configuration is read from ``.diagdoc.toml`` with tomlkit, deep-merged
over DEFAULT_CONFIG, then overridden by ``DIAGDOC_<SECTION>_<KEY>``
environment variables.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit
from tomlkit.exceptions import TOMLKitError

from diagdoc.config.defaults import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".diagdoc.toml"
ENV_PREFIX = "DIAGDOC_"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed."""


def find_config_file(start_dir: Path) -> Optional[Path]:
    """
    Find ``.diagdoc.toml`` in ``start_dir`` or any of its parents.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to the config file, or None if not found
    """
    current = Path(start_dir).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge ``override`` into a copy of ``base``.

    Nested dicts are merged key by key; any other value in ``override``
    replaces the base value.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _try_parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value into a typed value.

    JSON arrays and objects become lists and dicts, "true"/"false"
    (any case) become booleans, and everything else (including malformed
    JSON) is returned unchanged.
    """
    stripped = value.strip()
    if stripped.lower() == "true":
        return True
    if stripped.lower() == "false":
        return False
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            logger.debug("Environment value is not valid JSON, using as string: %s", value)
    return value


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply ``DIAGDOC_<SECTION>_<KEY>`` environment variables to ``config``.

    The section is the first underscore-separated token; the rest of the
    name (lowercased) is the key, so ``DIAGDOC_SCAN_SKIP_DIRS`` sets
    ``config["scan"]["skip_dirs"]``. Missing sections are created.
    """
    for name, value in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        remainder = name[len(ENV_PREFIX):].lower()
        section, sep, key = remainder.partition("_")
        if not sep or not section or not key:
            continue
        target = config.setdefault(section, {})
        if not isinstance(target, dict):
            continue
        target[key] = _try_parse_env_value(value)
    return config


def parse_config_text(text: str) -> Dict[str, Any]:
    """Parse TOML text into a plain dict."""
    try:
        return tomlkit.parse(text).unwrap()
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load a configuration file merged over the defaults.

    Args:
        config_path: Path to ``.diagdoc.toml``

    Returns:
        Merged configuration dict with environment overrides applied

    Raises:
        ConfigError: If the file is not valid TOML
    """
    content = Path(config_path).read_text(encoding="utf-8")
    try:
        user_config = parse_config_text(content)
    except ConfigError as e:
        raise ConfigError(f"{config_path}: {e}") from e
    merged = merge_configs(DEFAULT_CONFIG, user_config)
    return _apply_env_overrides(merged)


def get_config(
    config_path: Optional[Path] = None,
    start_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Resolve configuration the way every command does.

    Uses ``config_path`` when given, otherwise searches upward from
    ``start_dir`` (default: cwd). Falls back to defaults when no file is
    found.
    """
    if config_path is None:
        config_path = find_config_file(start_dir or Path.cwd())
    if config_path is None:
        return _apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG))
    logger.debug("Using config file %s", config_path)
    config = load_config(config_path)
    config.setdefault("_config_dir", str(Path(config_path).resolve().parent))
    return config


def get_docs_directory(config: Dict[str, Any], repo_root: Optional[Path] = None) -> Path:
    """
    Resolve the documentation root from ``[directories] docs``.

    Relative paths are resolved against the config file's directory when
    known, otherwise against ``repo_root`` (default: cwd).
    """
    docs = Path(config.get("directories", {}).get("docs", "docs"))
    if docs.is_absolute():
        return docs
    base = config.get("_config_dir")
    if base is not None:
        return Path(base) / docs
    return (repo_root or Path.cwd()) / docs
