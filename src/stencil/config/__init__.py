"""Stencil configuration.

This module provides the public API for stencil configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from stencil.config import Config
    >>> config = Config.load()
    >>> config.rendering.multi_doc_separator
    '---'
"""

# Re-export exceptions from main exceptions module
from stencil.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._loader import ENV_PREFIX, parse_env_vars, read_toml_file, set_nested_key
# ._models must be imported before ._discovery to avoid a circular import.
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RenderingConfig,
)
from ._discovery import (
    PROJECT_CONFIG_NAME,
    discover_sources,
    find_project_root,
    get_user_config_path,
)
from ._validation import ConfigSchema, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "PROJECT_CONFIG_NAME",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSchema",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RenderingConfig",
    "discover_sources",
    "find_project_root",
    "get_user_config_path",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
    "validate_config",
]
