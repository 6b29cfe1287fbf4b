# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and environment parsing."""

import json
import os
import re
import tomllib
from pathlib import Path
from typing import Any

from stencil.exceptions import ConfigLoadError

ENV_PREFIX = "STENCIL_"

_LOCATION_RE = re.compile(r"\(at line (\d+), column (\d+)\)")


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        line, column = _error_location(e)
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=line,
            column=column,
        ) from e


def _error_location(error: tomllib.TOMLDecodeError) -> tuple[int | None, int | None]:
    """Return the 1-based line and column of a TOML syntax error."""
    lineno: int | None = getattr(error, "lineno", None)
    if lineno is not None:
        return lineno, getattr(error, "colno", None)
    # Older interpreters only carry the location in the message
    match = _LOCATION_RE.search(str(error))
    if match is None:
        return None, None
    return int(match.group(1)), int(match.group(2))


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Parse environment variables into config dictionary.

    Args:
        prefix: Environment variable prefix (default: "STENCIL_").

    Returns:
        Dictionary of parsed config values with nested structure.

    Environment variable naming:
        - Add prefix (STENCIL_)
        - Convert to uppercase
        - Replace dots with double underscores
        - Example: rendering.tab_size -> STENCIL_RENDERING__TAB_SIZE
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        # STENCIL_RENDERING__TAB_SIZE -> rendering.tab_size
        config_key = key[len(prefix) :]
        if not config_key:
            continue

        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, _parse_env_value(value))

    return result


def _parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Parse environment variable value with type inference.

    Args:
        value: The raw string value from the environment variable.

    Returns:
        The parsed value with appropriate type.

    Order of type inference:
        1. Boolean: true/false (case-insensitive)
        2. Integer: parseable as int
        3. Float: parseable as float (with decimal point)
        4. JSON array: starts with [ ends with ]
        5. JSON object: starts with { ends with }
        6. String: anything else
    """
    # 1. Boolean check (case-insensitive)
    lower_value = value.lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    # 2. Integer check
    try:
        return int(value)
    except ValueError:
        pass

    # 3. Float check (must contain decimal point to distinguish from int)
    if "." in value:
        try:
            return float(value)
        except ValueError:
            pass

    # 4. JSON array or object check
    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    # 5. String (fallback)
    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path in a nested dictionary.

    Creates intermediate dictionaries as needed.

    Args:
        d: The dictionary to modify.
        key_path: Dotted key path (e.g., "logging.level").
        value: The value to set.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "logging.level", "debug")
        >>> d
        {'logging': {'level': 'debug'}}
    """
    parts = key_path.split(".")
    current = d

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            # Overwrite missing or non-dict value with dict
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value
