"""Conversion between YAML and JSON text."""

from types import MappingProxyType
from typing import Any

import orjson
import yaml
from jinja2 import Undefined
from pydantic import BaseModel


def to_plain(value: object) -> Any:  # pyright: ignore[reportExplicitAny]
    """Convert models and read-only mappings into plain YAML/JSON data.

    Undefined template values become None.
    """
    if isinstance(value, Undefined):
        return None
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, MappingProxyType):
        return {k: to_plain(v) for k, v in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


def dump_yaml(value: object) -> str:
    """Serialize a value to block-style YAML, keeping key order."""
    return yaml.safe_dump(
        to_plain(value),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def yaml_to_json(text: str) -> str:
    """Convert a single YAML document to JSON text.

    YAML-only scalar types (timestamps, non-string keys) are normalized to
    their JSON representation.

    Raises:
        yaml.YAMLError: If the text is not valid YAML.
        orjson.JSONEncodeError: If the YAML holds values JSON cannot express.
    """
    data = yaml.safe_load(text)
    return orjson.dumps(data, option=orjson.OPT_NON_STR_KEYS).decode()


def json_to_yaml(text: str) -> str:
    """Convert JSON text to block-style YAML.

    Raises:
        orjson.JSONDecodeError: If the text is not valid JSON.
    """
    return dump_yaml(orjson.loads(text))
