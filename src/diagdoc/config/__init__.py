"""
diagdoc.config - Configuration loading and defaults
"""

from diagdoc.config.defaults import DEFAULT_CONFIG
from diagdoc.config.loader import (
    CONFIG_FILENAME,
    ConfigError,
    _apply_env_overrides,
    _try_parse_env_value,
    find_config_file,
    get_config,
    get_docs_directory,
    load_config,
    merge_configs,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "load_config",
    "find_config_file",
    "merge_configs",
    "get_config",
    "get_docs_directory",
    "DEFAULT_CONFIG",
]
