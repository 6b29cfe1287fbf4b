"""Shared utilities: logging, merging and defaults."""

from ._defaults import apply_defaults
from ._logging import LogFormatType, create_logger
from ._merge import copy_value, deep_merge

__all__ = [
    "LogFormatType",
    "apply_defaults",
    "copy_value",
    "create_logger",
    "deep_merge",
]
