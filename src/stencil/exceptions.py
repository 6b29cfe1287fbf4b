"""Stencil exceptions."""

from pathlib import Path
from typing import Any, ClassVar


class StencilError(Exception):
    """Base exception for stencil errors.

    Attributes:
        component: Name of the component (or template) that failed.
        cause: The underlying exception, if any.
    """

    stage: ClassVar[str] = "component"

    def __init__(
        self,
        message: str,
        *,
        component: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and component context."""
        super().__init__(message)
        self.component: str | None = component
        self.cause: BaseException | None = cause


# =============================================================================
# Component Creation Exceptions
# =============================================================================


class FileReadError(StencilError):
    """Raised when a template file is missing or unreadable."""

    stage: ClassVar[str] = "load"

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        component: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and the template path."""
        super().__init__(message, component=component, cause=cause)
        self.path: Path = path


class PreprocessError(StencilError):
    """Raised when template preprocessing fails."""

    stage: ClassVar[str] = "preprocess"


class DefinitionError(StencilError):
    """Raised when a component definition is incomplete or inconsistent."""

    stage: ClassVar[str] = "definition"


# =============================================================================
# Render Exceptions
# =============================================================================


class SetupError(StencilError):
    """Raised when the caller's input-to-context transform fails."""

    stage: ClassVar[str] = "setup"


class ContextIntrospectionError(StencilError):
    """Raised when a context cannot be split into functions and variables."""

    stage: ClassVar[str] = "context"


class ParseError(StencilError):
    """Raised when a template has malformed syntax.

    Attributes:
        lineno: Line of the template where parsing failed, if known.
    """

    stage: ClassVar[str] = "parse"

    def __init__(
        self,
        message: str,
        *,
        lineno: int | None = None,
        component: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and location context."""
        super().__init__(message, component=component, cause=cause)
        self.lineno: int | None = lineno


class ExecutionError(StencilError):
    """Raised when a parsed template fails while executing."""

    stage: ClassVar[str] = "execute"


class CountMismatchError(StencilError, ValueError):
    """Raised when document and declared instance counts disagree.

    Attributes:
        expected: Number of declared instances.
        found: Number of documents in the rendered template.
    """

    stage: ClassVar[str] = "match"

    def __init__(
        self,
        message: str,
        *,
        expected: int,
        found: int,
        component: str | None = None,
    ) -> None:
        """Initialize with error message and both counts."""
        super().__init__(message, component=component)
        self.expected: int = expected
        self.found: int = found


class ValidationError(StencilError, ValueError):
    """Raised when a rendered document does not match its schema.

    Attributes:
        field: Dotted path of the unknown or invalid field, if known.
    """

    stage: ClassVar[str] = "decode"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        component: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and field context."""
        super().__init__(message, component=component, cause=cause)
        self.field: str | None = field


class RenderError(StencilError):
    """Raised for unexpected failures inside a render call.

    Wraps exceptions that escape caller-supplied callables (render overrides,
    custom hooks) so every failure reaches the caller through one channel.
    """

    stage: ClassVar[str] = "render"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(StencilError):
    """Base exception for configuration errors."""

    stage: ClassVar[str] = "config"


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source
