"""Project root and config path discovery utilities.

This module provides functions for locating the project configuration file
by searching upward through the directory tree for `stencil.toml`, and for
determining the platform-specific user configuration file path.
"""

from pathlib import Path

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName

PROJECT_CONFIG_NAME = "stencil.toml"


def find_project_root(start: Path | None = None) -> Path | None:
    """Find the project root by searching upward for stencil.toml.

    Args:
        start: Directory to start searching from. Defaults to current
            working directory if not specified.

    Returns:
        Path to the directory containing `stencil.toml`, or None if no
        project root is found.
    """
    current = (start or Path.cwd()).resolve()

    while True:
        if _file_exists(current / PROJECT_CONFIG_NAME):
            return current
        parent = current.parent
        if parent == current:  # Reached filesystem root
            return None
        current = parent


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/stencil/config.toml``
    - macOS: ``~/Library/Application Support/stencil/config.toml``
    - Windows: ``%APPDATA%\stencil\config.toml``

    The path is returned regardless of whether the file exists.

    Returns:
        Path to the user config file for the current platform.
    """
    return platformdirs.user_config_path("stencil") / "config.toml"


def _file_exists(path: Path) -> bool:
    """Check if a file exists, handling permission errors gracefully."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
) -> list[ConfigSource]:
    """Discover all configuration sources.

    Sources are returned in precedence order (highest first). File-based
    sources are checked for existence but not read.

    Args:
        project_root: Directory holding `stencil.toml`. If None, auto-detect
            by searching upward from the current directory.
        include_env: Include environment variables as a source.

    Returns:
        List of ConfigSource objects in precedence order (highest first).
    """
    sources: list[ConfigSource] = []

    resolved_root = project_root if project_root else find_project_root()

    if include_env:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.ENV,
                path=None,
                exists=True,  # Actual values parsed during loading phase
                values={},
            )
        )

    if resolved_root:
        project_path = resolved_root / PROJECT_CONFIG_NAME
        sources.append(
            ConfigSource(
                name=ConfigSourceName.PROJECT,
                path=project_path,
                exists=_file_exists(project_path),
                values={},
            )
        )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
