"""Configuration models.

This module provides Pydantic models for stencil configuration sections
and the main Config container class.
"""

from stencil.config._models._common import (
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LogLevel,
)
from stencil.config._models._config import Config
from stencil.config._models._logging import LoggingConfig
from stencil.config._models._rendering import RenderingConfig

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RenderingConfig",
]
