# pyright: reportAny=false, reportExplicitAny=false
"""Strict decoding of rendered documents into typed values."""

import collections.abc
import dataclasses
import types
from collections.abc import Mapping
from typing import (
    Annotated,
    Any,
    TypeAliasType,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

import orjson
import pydantic
import yaml
from pydantic import BaseModel, TypeAdapter
from pydantic.fields import FieldInfo

from stencil.exceptions import ValidationError
from stencil.utils import deep_merge

from ._convert import yaml_to_json

_SEQUENCE_ORIGINS = (list, set, frozenset, collections.abc.Sequence, collections.abc.Set)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def _join(path: str, key: object) -> str:
    return f"{path}.{key}" if path else str(key)


def _input_key(name: str, info: FieldInfo) -> str:
    """Return the key a model field is read from during validation."""
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _known_model_fields(model: type[BaseModel]) -> dict[str, Any]:
    known: dict[str, Any] = {}
    for name, info in model.model_fields.items():
        known[name] = info.annotation
        if info.alias:
            known[info.alias] = info.annotation
        if isinstance(info.validation_alias, str):
            known[info.validation_alias] = info.annotation
    return known


def _known_class_fields(cls: type) -> dict[str, Any]:
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}
    if dataclasses.is_dataclass(cls):
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls)}
    return hints


def _check_record(data: dict[str, Any], known: dict[str, Any], path: str) -> str | None:
    for key, value in data.items():
        if key not in known:
            return _join(path, key)
        unknown = find_unknown_field(value, known[key], _join(path, key))
        if unknown is not None:
            return unknown
    return None


def _item_types(data: list[Any], origin: Any, args: tuple[Any, ...]) -> list[Any] | None:
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:  # noqa: PLR2004
            return [args[0]] * len(data)
        return list(args)
    if origin in _SEQUENCE_ORIGINS and args:
        return [args[0]] * len(data)
    return None


def find_unknown_field(data: Any, annotation: Any, path: str = "") -> str | None:
    """Find the first key in data that the target type does not declare.

    Walks decoded YAML/JSON data alongside the type it will be validated
    against. Pydantic models, dataclasses and TypedDicts are checked for
    undeclared keys; lists, dicts, optionals and unions are descended into.
    Models configured with `extra="allow"` accept any key.

    Args:
        data: Decoded document data.
        annotation: Target type.
        path: Dotted path of data within the document.

    Returns:
        Dotted path of the first unknown key, or None if every key is known.
    """
    if isinstance(annotation, TypeAliasType):
        return find_unknown_field(data, annotation.__value__, path)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return find_unknown_field(data, args[0], path)

    if origin is Union or origin is types.UnionType:
        if data is None:
            return None
        reports = [find_unknown_field(data, arg, path) for arg in args if arg is not type(None)]
        # Any member that accepts every key wins
        if not reports or any(report is None for report in reports):
            return None
        return reports[0]

    if isinstance(data, list):
        item_types = _item_types(data, origin, args)
        if item_types is None:
            return None
        for index, (item, item_type) in enumerate(zip(data, item_types, strict=False)):
            unknown = find_unknown_field(item, item_type, _join(path, index))
            if unknown is not None:
                return unknown
        return None

    if not isinstance(data, dict):
        return None

    if origin in _MAPPING_ORIGINS:
        if len(args) != 2:  # noqa: PLR2004
            return None
        for key, value in data.items():
            unknown = find_unknown_field(value, args[1], _join(path, key))
            if unknown is not None:
                return unknown
        return None

    if not isinstance(annotation, type):
        return None

    if issubclass(annotation, BaseModel):
        if annotation.model_config.get("extra") == "allow":
            return None
        return _check_record(data, _known_model_fields(annotation), path)

    if dataclasses.is_dataclass(annotation) or is_typeddict(annotation):
        return _check_record(data, _known_class_fields(annotation), path)

    return None


def _normalize_keys(data: Any, annotation: Any) -> Any:
    """Rename model keys in data to the key each field is validated from.

    Documents may name a field by its name or by any of its aliases. Blueprint
    bases always use one form, so the document is brought to the same form
    before the two are merged.
    """
    if isinstance(annotation, TypeAliasType):
        return _normalize_keys(data, annotation.__value__)

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _normalize_keys(data, args[0])

    if origin is Union or origin is types.UnionType:
        for arg in args:
            if arg is not type(None) and find_unknown_field(data, arg) is None:
                return _normalize_keys(data, arg)
        return data

    if isinstance(data, list):
        item_types = _item_types(data, origin, args)
        if item_types is None:
            return data
        normalized = [
            _normalize_keys(item, item_type)
            for item, item_type in zip(data, item_types, strict=False)
        ]
        return normalized + data[len(normalized) :]

    if not isinstance(data, dict):
        return data

    if origin in _MAPPING_ORIGINS:
        if len(args) != 2:  # noqa: PLR2004
            return data
        return {key: _normalize_keys(value, args[1]) for key, value in data.items()}

    if not isinstance(annotation, type):
        return data

    if issubclass(annotation, BaseModel):
        lookup: dict[str, tuple[str, Any]] = {}
        for name, info in annotation.model_fields.items():
            target = (_input_key(name, info), info.annotation)
            for accepted in (name, info.alias, info.validation_alias):
                if isinstance(accepted, str):
                    lookup[accepted] = target
        result: dict[str, Any] = {}
        for key, value in data.items():
            if key in lookup:
                input_key, field_type = lookup[key]
                result[input_key] = _normalize_keys(value, field_type)
            else:
                result[key] = value
        return result

    if dataclasses.is_dataclass(annotation) or is_typeddict(annotation):
        known = _known_class_fields(annotation)
        return {
            key: _normalize_keys(value, known[key]) if key in known else value
            for key, value in data.items()
        }

    return data


def _base_value(value: object) -> Any:
    """Convert a blueprint value into plain data keyed like a document.

    Only declared fields are kept, so computed fields never reach validation.
    """
    if isinstance(value, BaseModel):
        base = {
            _input_key(name, info): _base_value(getattr(value, name))
            for name, info in type(value).model_fields.items()
        }
        if value.model_extra:
            base.update({key: _base_value(extra) for key, extra in value.model_extra.items()})
        return base
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _base_value(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {key: _base_value(item) for key, item in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, (list, tuple)):
        return [_base_value(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


def _resolve_blueprint(blueprint: object) -> tuple[Any, dict[str, Any] | None]:
    """Split a blueprint into the type to validate against and its base data."""
    if isinstance(blueprint, BaseModel) or (
        dataclasses.is_dataclass(blueprint) and not isinstance(blueprint, type)
    ):
        return type(blueprint), _base_value(blueprint)
    if isinstance(blueprint, Mapping):
        return dict[str, Any], _base_value(blueprint)
    return blueprint, None


def _is_record_type(target: object) -> bool:
    return isinstance(target, type) and (
        issubclass(target, BaseModel) or dataclasses.is_dataclass(target) or is_typeddict(target)
    )


def _validation_error(
    error: pydantic.ValidationError, component: str
) -> ValidationError:
    details = error.errors()
    if not details:
        return ValidationError(
            f"invalid document in {component!r}: {error}", component=component, cause=error
        )

    first = details[0]
    field = ".".join(str(part) for part in first["loc"]) or None
    where = f" at {field}" if field else ""
    msg = f"invalid document in {component!r}{where}: {first['msg']}"
    return ValidationError(msg, field=field, component=component, cause=error)


def decode_document(document: str, blueprint: object, *, component: str = "") -> object:
    """Decode a rendered YAML document into a typed value.

    The document is converted to JSON and validated against the blueprint.
    Keys the target type does not declare are rejected before validation, so
    typos in templates are reported instead of silently dropped.

    Blueprints may be a pydantic model class, a dataclass, a TypedDict or any
    other type pydantic can validate. A blueprint instance (model, dataclass
    or mapping) supplies base values: the document is merged over it and a new
    value is returned. The blueprint itself is never modified.

    Args:
        document: A single rendered YAML document.
        blueprint: Target type, or an instance to merge the document into.
        component: Component name used in error messages.

    Returns:
        The decoded value.

    Raises:
        ValidationError: If the document is not valid YAML, contains an
            unknown field, or fails validation.
    """
    try:
        data = orjson.loads(yaml_to_json(document))
    except (yaml.YAMLError, orjson.JSONEncodeError) as e:
        msg = f"failed to convert document in {component!r} to JSON: {e}"
        raise ValidationError(msg, component=component, cause=e) from e

    target, base = _resolve_blueprint(blueprint)

    if base is not None:
        if data is None:
            data = base
        elif isinstance(data, dict):
            data = deep_merge(base, _normalize_keys(data, target))  # pyright: ignore[reportUnknownArgumentType]

    if data is None and _is_record_type(target):
        data = {}

    unknown = find_unknown_field(data, target)
    if unknown is not None:
        msg = f'unknown field "{unknown}" in {component!r}'
        raise ValidationError(msg, field=unknown, component=component)

    try:
        if isinstance(target, type) and issubclass(target, BaseModel):
            return target.model_validate(data)
        return TypeAdapter(target).validate_python(data)
    except pydantic.ValidationError as e:
        raise _validation_error(e, component) from e
