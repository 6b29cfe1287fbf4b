"""Splitting a render context into template functions and variables."""

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel

from stencil.exceptions import ContextIntrospectionError


@dataclass(frozen=True, slots=True)
class TemplateFunction:
    """Explicit binding exposing a callable to templates.

    Attributes:
        name: Identifier used in templates, e.g. `{{ Catify("x") }}`.
        fn: The callable.
    """

    name: str
    fn: Callable[..., object]


@dataclass(frozen=True, slots=True)
class TemplateVariable:
    """Explicit binding exposing a value to templates.

    Attributes:
        name: Field name under the variable namespace.
        value: The value.
    """

    name: str
    value: object


type Binding = TemplateFunction | TemplateVariable


@dataclass(frozen=True, slots=True)
class SplitContext:
    """Result of splitting a context.

    Attributes:
        functions: Callables keyed by field name.
        variables: Read-only view of all non-callable fields.
    """

    functions: dict[str, Callable[..., object]]
    variables: Mapping[str, object]


def _is_template_function(value: object) -> bool:
    # Classes are callable but are passed through as values
    return callable(value) and not isinstance(value, type)


def _iter_fields(context: object) -> Iterable[tuple[str, object]] | None:
    """Enumerate the fields of a record-like context in declaration order."""
    if isinstance(context, Mapping):
        return ((str(k), v) for k, v in context.items())  # pyright: ignore[reportUnknownVariableType,reportUnknownArgumentType]
    if isinstance(context, BaseModel):
        return ((name, getattr(context, name)) for name in type(context).model_fields)
    if dataclasses.is_dataclass(context) and not isinstance(context, type):
        return ((f.name, getattr(context, f.name)) for f in dataclasses.fields(context))
    if isinstance(context, tuple) and hasattr(context, "_asdict"):
        named: dict[str, Any] = context._asdict()  # pyright: ignore[reportAttributeAccessIssue,reportUnknownMemberType,reportExplicitAny]
        return named.items()
    if isinstance(context, (str, bytes, int, float, bool, list, tuple, set, frozenset)):
        return None
    if hasattr(context, "__dict__"):
        return vars(context).items()
    return None


def _split_bindings(
    bindings: Iterable[Binding], component: str
) -> tuple[dict[str, Callable[..., object]], dict[str, object]]:
    functions: dict[str, Callable[..., object]] = {}
    variables: dict[str, object] = {}
    seen: set[str] = set()

    for binding in bindings:
        if binding.name in seen:
            msg = f"duplicate context binding {binding.name!r} in {component!r}"
            raise ContextIntrospectionError(msg, component=component)
        seen.add(binding.name)

        if isinstance(binding, TemplateFunction):
            functions[binding.name] = binding.fn
        else:
            variables[binding.name] = binding.value

    return functions, variables


def split_context(context: object, *, component: str = "") -> SplitContext:
    """Split a context into template functions and template variables.

    Callable fields become template functions, callable as `{{ Name(args) }}`
    or usable as filters. All other fields become variables, read through the
    variable namespace as `{{ Stencil.Name }}`.

    Accepted contexts: None (empty), a mapping, a pydantic model, a dataclass
    instance, a named tuple, an object with instance attributes, or a list or
    tuple of TemplateFunction / TemplateVariable bindings. An empty list or
    tuple is an empty binding list, like None.

    Args:
        context: The context returned by a component's setup function.
        component: Component name used in error messages.

    Returns:
        SplitContext with the functions and a read-only variable view.

    Raises:
        ContextIntrospectionError: If the context is not record-like, or an
            explicit binding name is repeated.
    """
    if context is None:
        return SplitContext(functions={}, variables=MappingProxyType({}))

    if isinstance(context, (list, tuple)) and all(
        isinstance(item, (TemplateFunction, TemplateVariable))
        for item in context  # pyright: ignore[reportUnknownVariableType]
    ):
        functions, variables = _split_bindings(context, component)  # pyright: ignore[reportUnknownArgumentType]
        return SplitContext(functions=functions, variables=MappingProxyType(variables))

    fields = _iter_fields(context)
    if fields is None:
        msg = (
            f"failed to process context in {component!r}: "
            f"cannot read fields of {type(context).__name__}"
        )
        raise ContextIntrospectionError(msg, component=component)

    functions = {}
    variables = {}
    for name, value in fields:
        if _is_template_function(value):
            functions[name] = value
        else:
            variables[name] = value

    return SplitContext(functions=functions, variables=MappingProxyType(variables))
