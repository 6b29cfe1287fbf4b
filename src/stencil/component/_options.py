"""Component options."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Self

from structlog.typing import FilteringBoundLogger

from stencil.config import Config
from stencil.documents import DEFAULT_SEPARATOR
from stencil.templating import DEFAULT_NAMESPACE, EnvironmentConfig
from stencil.utils import create_logger

type PreprocessHook = Callable[[str, ComponentOptions], str]
type UnmarshalHook = Callable[[str, object, ComponentOptions], object]


@dataclass(frozen=True, slots=True)
class ComponentOptions:
    """Options controlling how a component is created and rendered.

    Attributes:
        panic_on_error: Raise render errors instead of returning them in the
            result.
        preprocess_template: Replaces the default template preprocessing.
            Called once at creation with the raw template and these options.
        unmarshal: Replaces the default strict decoding. Called with one
            rendered document, its blueprint and these options.
        multi_doc_separator: Line that separates documents in multi-document
            components.
        tab_size: Number of spaces each tab expands to during preprocessing.
            None leaves tabs untouched.
        strict_undefined: Fail renders that reference undefined variables.
        namespace: Top-level template name the context variables live under.
        environment: Jinja2 whitespace options.
        frontload_enabled: Render once at creation with frontload_input, so
            broken templates fail at startup rather than at first use.
        frontload_input: Input passed to the frontload render.
        logger: Logger for component events. Defaults to a stderr logger.
    """

    panic_on_error: bool = False
    preprocess_template: PreprocessHook | None = None
    unmarshal: UnmarshalHook | None = None
    multi_doc_separator: str = DEFAULT_SEPARATOR
    tab_size: int | None = None
    strict_undefined: bool = False
    namespace: str = DEFAULT_NAMESPACE
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    frontload_enabled: bool = False
    frontload_input: object = None
    logger: FilteringBoundLogger | None = None

    @classmethod
    def from_config(cls, config: Config, **overrides: Any) -> Self:  # pyright: ignore[reportExplicitAny,reportAny]
        """Create options from loaded configuration.

        The [rendering] section supplies the rendering defaults and the
        [logging] section configures the logger.

        Args:
            config: Loaded configuration.
            **overrides: Option values that take precedence over configuration.

        Returns:
            The component options.
        """
        rendering = config.rendering
        values: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
            "panic_on_error": rendering.panic_on_error,
            "multi_doc_separator": rendering.multi_doc_separator,
            "tab_size": rendering.tab_size,
            "strict_undefined": rendering.strict_undefined,
            "namespace": rendering.namespace,
            "frontload_enabled": rendering.frontload_enabled,
            "environment": EnvironmentConfig(
                trim_blocks=rendering.trim_blocks,
                lstrip_blocks=rendering.lstrip_blocks,
                keep_trailing_newline=rendering.keep_trailing_newline,
            ),
            "logger": create_logger(
                level=config.logging.level.value,
                log_format=config.logging.format.value,
                log_file=config.logging.file,
            ),
        }
        values.update(overrides)
        return cls(**values)  # pyright: ignore[reportAny]
