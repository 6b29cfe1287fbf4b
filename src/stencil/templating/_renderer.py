"""Template rendering engine."""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import cast

from jinja2 import TemplateSyntaxError

from stencil.exceptions import ExecutionError, ParseError

from ._context import split_context
from ._environment import MISSING_VALUE, EnvironmentConfig, create_environment
from ._escape import escape_actions, unescape_actions
from ._functions import builtin_functions, custom_functions

DEFAULT_NAMESPACE = "Stencil"


def build_function_map(
    context_functions: dict[str, Callable[..., object]] | None = None,
) -> dict[str, Callable[..., object]]:
    """Merge the helper functions with the functions found in a context.

    Later sources override earlier ones: built-in helpers, then the custom
    helpers, then the context's own callables.

    Args:
        context_functions: Callables taken from the render context.

    Returns:
        The combined function map.
    """
    functions = builtin_functions()
    functions.update(custom_functions())
    if context_functions:
        functions.update(context_functions)
    return functions


def render_template_string(
    template_str: str,
    context: object,
    *,
    name: str = "<string>",
    strict: bool = False,
    namespace: str = DEFAULT_NAMESPACE,
    config: EnvironmentConfig | None = None,
    search_paths: Iterable[Path | str] = (),
) -> str:
    """Render a template string with a context.

    Callable context fields are exposed as template functions and filters;
    every other field is read through the namespace, e.g.
    `{{ Stencil.Number }}`. Escaped actions (`{{! ... }}`) are passed
    through to the output untouched, minus the escape marker.

    Missing values render as nothing unless `strict` is set.

    Args:
        template_str: The Jinja2 template string.
        context: Render context (mapping, model, dataclass, bindings or None).
        name: Component name used in error messages.
        strict: Fail on undefined variables.
        namespace: Top-level key the context variables are exposed under.
        config: Optional Jinja2 environment configuration.
        search_paths: Directories searched by `{% include %}`.

    Returns:
        Rendered string.

    Raises:
        ContextIntrospectionError: If the context cannot be split.
        ParseError: If the template has a syntax error.
        ExecutionError: If rendering fails.
    """
    escaped = escape_actions(template_str)
    split = split_context(context, component=name)

    env = create_environment(
        config=config,
        functions=build_function_map(split.functions),
        strict=strict,
        search_paths=search_paths,
    )

    try:
        template = env.from_string(escaped.text)
    except TemplateSyntaxError as e:
        msg = f"parse error in {name!r}: {e.message}"
        raise ParseError(msg, component=name, cause=e, lineno=e.lineno) from e

    try:
        rendered = cast("str", template.render({namespace: split.variables}))
    except Exception as e:
        msg = f"render error in {name!r}: {e}"
        raise ExecutionError(msg, component=name, cause=e) from e

    rendered = rendered.replace(MISSING_VALUE, "")
    return unescape_actions(rendered, escaped.slots)
