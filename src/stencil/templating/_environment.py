"""Jinja2 Environment factory."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from jinja2 import ChainableUndefined, Environment, FileSystemLoader, StrictUndefined

MISSING_VALUE = "<no value>"


class ZeroValueUndefined(ChainableUndefined):
    """Undefined value that renders as the missing-value sentinel.

    Attribute and item access chain, so `{{ Stencil.A.B.C }}` renders the
    sentinel instead of failing when `A` is absent. The sentinel is removed
    from the output after rendering.
    """

    __slots__ = ()

    def __str__(self) -> str:
        return MISSING_VALUE


@dataclass(slots=True, frozen=True)
class EnvironmentConfig:
    """Configuration for Jinja2 Environment.

    Attributes:
        autoescape: Enable autoescaping (default: False for YAML/text templates).
        trim_blocks: Remove first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before block tags.
        keep_trailing_newline: Preserve trailing newline in templates.
    """

    autoescape: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True


class ComponentEnvironment(Environment):
    """Jinja2 Environment where `a.b` on a mapping reads key `b` first.

    Plain Jinja2 resolves `Stencil.items` to the `items` method of the
    variable mapping. Component contexts use field names freely, so a key
    always wins over a mapping method of the same name.
    """

    def getattr(self, obj: object, attribute: str) -> object:  # noqa: D102
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]  # pyright: ignore[reportUnknownVariableType]
            except (KeyError, TypeError):
                pass
        return super().getattr(obj, attribute)


def _finalize(value: object) -> object:
    return MISSING_VALUE if value is None else value


def create_environment(
    *,
    config: EnvironmentConfig | None = None,
    functions: Mapping[str, Callable[..., object]] | None = None,
    strict: bool = False,
    search_paths: Iterable[Path | str] = (),
) -> Environment:
    """Create a Jinja2 Environment for rendering components.

    Every function is registered both as a global, `{{ toYaml(x) }}`, and as
    a filter, `{{ x | toYaml }}`.

    Note: autoescape is disabled by default as components render YAML and
    other plain text, not HTML.

    Args:
        config: Optional environment configuration. If None, uses defaults.
        functions: Template functions keyed by name.
        strict: Raise on undefined variables instead of rendering the
            missing-value sentinel.
        search_paths: Directories searched by `{% include %}` and
            `{% import %}`.

    Returns:
        Configured Jinja2 Environment.
    """
    if config is None:
        config = EnvironmentConfig()

    loader = FileSystemLoader([str(p) for p in search_paths])
    env = ComponentEnvironment(
        loader=loader,
        autoescape=config.autoescape,  # noqa: S701
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=config.keep_trailing_newline,
        undefined=StrictUndefined if strict else ZeroValueUndefined,
        finalize=_finalize,
    )

    if functions:
        env.globals.update(functions)
        env.filters.update(functions)

    return env
