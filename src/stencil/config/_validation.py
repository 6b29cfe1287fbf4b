# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownMemberType=false, reportUnknownVariableType=false
"""Configuration validation using Pydantic schemas.

Known sections reject unknown keys. Unknown top-level keys are ignored so
that unrelated STENCIL_* environment variables (STENCIL_DEBUG,
STENCIL_LOG_LEVEL) do not break loading.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import ErrorDetails

from stencil.config._models._logging import LoggingConfig
from stencil.config._models._rendering import RenderingConfig
from stencil.exceptions import ConfigValidationError


class ConfigSchema(BaseModel):
    """Pydantic schema for root configuration."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    rendering: RenderingConfig = RenderingConfig()


def _expected(error: ErrorDetails) -> str:
    ctx = error.get("ctx")
    if ctx is not None:
        if "expected" in ctx:
            return str(ctx["expected"])
        if "pattern" in ctx:
            return f"pattern: {ctx['pattern']}"
    return str(error.get("msg", "Validation error"))


def validate_config(
    config: dict[str, Any],
    *,
    source: str | None = None,
) -> ConfigSchema:
    """Validate a merged configuration dictionary.

    Args:
        config: The merged configuration dictionary to validate.
        source: Name or path of the source the values came from, used in
            the error.

    Returns:
        The parsed configuration sections.

    Raises:
        ConfigValidationError: For the first invalid value found.
    """
    try:
        return ConfigSchema.model_validate(config)
    except ValidationError as e:
        error = e.errors()[0]
        key = ".".join(str(part) for part in error.get("loc", ()))
        msg = f"Invalid configuration value for '{key}'"
        raise ConfigValidationError(
            msg,
            key=key,
            value=error.get("input"),
            expected=_expected(error),
            source=source,
        ) from e
