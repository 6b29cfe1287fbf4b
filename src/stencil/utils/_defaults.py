"""Fill unset fields of an input value from a defaults value."""

import dataclasses
from collections.abc import Mapping
from typing import Any, cast

from pydantic import BaseModel


def _is_zero(value: object) -> bool:
    """Return True if value is the zero value of its type."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float, complex)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _is_record(value: object) -> bool:
    return isinstance(value, (BaseModel, Mapping)) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    )


def _merge_field(current: object, default: object) -> object:
    if _is_record(current) and _is_record(default):
        return apply_defaults(current, default)
    if _is_zero(current):
        return default
    return current


def apply_defaults[T](value: T, defaults: T | None) -> T:
    """Return a copy of value with zero-valued fields taken from defaults.

    A field is zero-valued when it is None, False, 0, an empty string or an
    empty container. Nested models, dataclasses and mappings are merged field
    by field instead of being replaced. Neither argument is modified.

    Args:
        value: The value to complete. Supports pydantic models, dataclass
            instances and mappings.
        defaults: Value of the same shape holding the defaults. None returns
            value unchanged.

    Returns:
        A new value of the same type as value.

    Raises:
        TypeError: If value is not a pydantic model, dataclass or mapping.

    Example:
        >>> @dataclasses.dataclass
        ... class Input:
        ...     name: str = ""
        ...     replicas: int = 0
        >>> apply_defaults(Input(name="web"), Input(replicas=2))
        Input(name='web', replicas=2)
    """
    if defaults is None:
        return value

    if isinstance(value, BaseModel):
        updates = {
            name: _merge_field(getattr(value, name), getattr(defaults, name, None))
            for name in type(value).model_fields
        }
        return value.model_copy(update=updates)

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        updates = {
            f.name: _merge_field(getattr(value, f.name), getattr(defaults, f.name, None))
            for f in dataclasses.fields(value)
            if f.init
        }
        return cast("T", dataclasses.replace(value, **updates))

    if isinstance(value, Mapping):
        current = cast("Mapping[str, Any]", value)  # pyright: ignore[reportExplicitAny]
        default_map = cast("Mapping[str, Any]", defaults)  # pyright: ignore[reportExplicitAny]
        merged: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]
        for key in (*current.keys(), *(k for k in default_map if k not in current)):
            merged[key] = _merge_field(current.get(key), default_map.get(key))
        return cast("T", merged)

    msg = f"Cannot apply defaults to value of type {type(value).__name__}"
    raise TypeError(msg)
