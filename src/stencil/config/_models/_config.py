# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing stencil configuration values.
"""

from pathlib import Path
from typing import Any, ClassVar, Self, overload

from pydantic import BaseModel, ConfigDict, PrivateAttr

from stencil.config._defaults import DEFAULT_CONFIG
from stencil.config._discovery import discover_sources
from stencil.config._loader import parse_env_vars, read_toml_file
from stencil.config._models._common import ConfigSource, ConfigSourceName
from stencil.config._models._logging import LoggingConfig
from stencil.config._models._rendering import RenderingConfig
from stencil.config._validation import validate_config
from stencil.utils import copy_value, deep_merge


class Config(BaseModel):
    """Configuration container with typed access.

    This class provides immutable, type-safe access to stencil configuration.
    Use factory methods to create instances rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    # Private attributes - not included in model fields
    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _logging: LoggingConfig = PrivateAttr(default_factory=LoggingConfig)
    _rendering: RenderingConfig = PrivateAttr(default_factory=RenderingConfig)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
        _logging: LoggingConfig | None = None,
        _rendering: RenderingConfig | None = None,
    ) -> None:
        """Initialize configuration container.

        This constructor is intended for internal use. Use factory methods
        like from_dict(), from_file(), or load() to create Config instances.

        Args:
            _data: The complete merged configuration dictionary.
            _sources: Sources that contributed to this configuration.
            _logging: Parsed logging configuration section.
            _rendering: Parsed rendering configuration section.
        """
        super().__init__()
        self._data = _data if _data is not None else copy_value(DEFAULT_CONFIG)
        self._sources = _sources
        self._logging = _logging if _logging is not None else LoggingConfig()
        self._rendering = _rendering if _rendering is not None else RenderingConfig()

    @classmethod
    def _build(
        cls,
        merged: dict[str, Any],
        sources: tuple[ConfigSource, ...],
        *,
        source: str | None = None,
    ) -> Self:
        schema = validate_config(merged, source=source)
        return cls(
            _data=merged,
            _sources=sources,
            _logging=schema.logging,
            _rendering=schema.rendering,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary.

        Args:
            data: Dictionary of configuration values, merged over the defaults.

        Returns:
            Configuration object from the dictionary.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return cls._build(deep_merge(DEFAULT_CONFIG, data), ())

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.PROJECT,  # Treat single file as project source
            path=path,
            exists=True,
            values=data,
        )
        return cls._build(deep_merge(DEFAULT_CONFIG, data), (source,), source=str(path))

    @classmethod
    def load(
        cls,
        *,
        project_root: Path | None = None,
        include_env: bool = True,
    ) -> Self:
        """Load merged configuration from all sources.

        Discovers all configuration sources and merges them in precedence order
        (defaults -> user -> project -> env).

        Args:
            project_root: Directory holding `stencil.toml`. If None,
                auto-detect by searching upward from the current directory.
            include_env: Include STENCIL_* environment variables as a source.

        Returns:
            Merged configuration object.

        Raises:
            ConfigLoadError: If config files cannot be loaded.
            ConfigValidationError: If merged config fails validation.
        """
        sources = discover_sources(project_root=project_root, include_env=include_env)

        merged: dict[str, Any] = {}
        loaded_sources: list[ConfigSource] = []

        # Sources are discovered highest-to-lowest, so reverse for merging
        for source in reversed(sources):
            values: dict[str, Any] = {}

            if source.name == ConfigSourceName.DEFAULT:
                values = source.values
            elif source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path and source.exists:
                values = read_toml_file(source.path)

            loaded_sources.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )

            if values:
                merged = deep_merge(merged, values)

        return cls._build(merged, tuple(reversed(loaded_sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        """Return the logging configuration section."""
        return self._logging

    @property
    def rendering(self) -> RenderingConfig:
        """Return the rendering configuration section."""
        return self._rendering

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get[T](self, key: str, default: T) -> Any | T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., "rendering.namespace").
            default: Default value if key not found.

        Returns:
            The configuration value, or default if not found.

        Examples:
            >>> config.get("logging.level")
            'info'
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data

        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the merged configuration dictionary."""
        return copy_value(self._data)
