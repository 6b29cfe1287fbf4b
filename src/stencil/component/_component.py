"""Templated components: creation and rendering."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from structlog.typing import FilteringBoundLogger

from stencil.documents import decode_document, match_instances, split_documents
from stencil.exceptions import (
    DefinitionError,
    FileReadError,
    PreprocessError,
    RenderError,
    SetupError,
    StencilError,
    ValidationError,
)
from stencil.templating import preprocess_template, render_template_string
from stencil.utils import create_logger

from ._options import ComponentOptions
from ._result import MultiRenderResult, RenderResult

type SetupFn[I] = Callable[[I], object]
type RenderFn[I, T] = Callable[[I, Any, str], T]  # pyright: ignore[reportExplicitAny]
type MultiRenderFn[I, T] = Callable[[I, Any, list[str]], Sequence[T]]  # pyright: ignore[reportExplicitAny]
type InstancesFn[I, T] = Callable[[I, Any], Sequence[T]]  # pyright: ignore[reportExplicitAny]


@dataclass(frozen=True, slots=True)
class _ComponentCore[I]:
    """State and render stages shared by single and multi components."""

    name: str
    template: str
    setup: SetupFn[I] | None
    options: ComponentOptions
    search_paths: tuple[Path, ...]
    logger: FilteringBoundLogger

    def _run_setup(self, value: I) -> object:
        if self.setup is None:
            return None
        try:
            return self.setup(value)
        except StencilError:
            raise
        except Exception as e:
            msg = f"setup failed in {self.name!r}: {e}"
            raise SetupError(msg, component=self.name, cause=e) from e

    def _render_text(self, context: object) -> str:
        return render_template_string(
            self.template,
            context,
            name=self.name,
            strict=self.options.strict_undefined,
            namespace=self.options.namespace,
            config=self.options.environment,
            search_paths=self.search_paths,
        )

    def _unmarshal(self, document: str, blueprint: object) -> object:
        hook = self.options.unmarshal
        if hook is None:
            return decode_document(document, blueprint, component=self.name)
        try:
            return hook(document, blueprint, self.options)
        except StencilError:
            raise
        except Exception as e:
            msg = f"failed to decode document in {self.name!r}: {e}"
            raise ValidationError(msg, component=self.name, cause=e) from e

    def _unexpected(self, error: Exception) -> RenderError:
        msg = f"failed rendering component {self.name!r}: {error}"
        return RenderError(msg, component=self.name, cause=error)

    def _report(self, error: StencilError) -> None:
        self.logger.warning(
            "component_render_failed",
            stage=error.stage,
            error=str(error),
        )
        if self.options.panic_on_error:
            raise error from error.cause


@dataclass(frozen=True, slots=True)
class Component[I, T](_ComponentCore[I]):
    """A template that renders a single document into a typed value.

    Create with create_component().
    """

    schema: object
    render_override: RenderFn[I, T] | None

    def render(self, value: I) -> RenderResult[T]:
        """Render the component for one input.

        Runs setup, renders the template, then decodes the output into the
        schema, or passes it to the render override when one is set.

        Args:
            value: Input passed to the setup function.

        Returns:
            RenderResult with the instance and rendered text, or the error.

        Raises:
            StencilError: Any render error, if panic_on_error is set.
        """
        content = ""
        try:
            context = self._run_setup(value)
            content = self._render_text(context)
            if self.render_override is not None:
                instance = self.render_override(value, context, content)
            else:
                instance = cast("T", self._unmarshal(content, self.schema))
        except StencilError as e:
            error = e
        except Exception as e:  # noqa: BLE001
            error = self._unexpected(e)
        else:
            self.logger.debug("component_rendered", documents=1)
            return RenderResult(instance=instance, content=content)

        self._report(error)
        return RenderResult(content=content, error=error)


@dataclass(frozen=True, slots=True)
class MultiComponent[I, T](_ComponentCore[I]):
    """A template that renders several documents into typed values.

    Create with create_multi_component().
    """

    instances: Sequence[T] | InstancesFn[I, T] | None
    render_override: MultiRenderFn[I, T] | None

    def _resolve_instances(self, value: I, context: object) -> Sequence[T] | None:
        if self.instances is None or isinstance(self.instances, Sequence):
            return self.instances
        return self.instances(value, context)

    def render(self, value: I) -> MultiRenderResult[T]:
        """Render the component for one input.

        Runs setup, renders the template and splits the output into
        documents. Each document is decoded into the instance declared at
        the same position, or all of them are passed to the render override.
        When instances are declared, the document count must match before
        anything is decoded.

        Args:
            value: Input passed to the setup function.

        Returns:
            MultiRenderResult with the instances and documents, or the error.

        Raises:
            StencilError: Any render error, if panic_on_error is set.
        """
        contents: list[str] = []
        try:
            context = self._run_setup(value)
            content = self._render_text(context)
            contents = [content]
            contents = split_documents(content, self.options.multi_doc_separator)

            blueprints = self._resolve_instances(value, context)
            if blueprints is not None:
                pairs = match_instances(contents, blueprints, component=self.name)
            else:
                pairs = []

            if self.render_override is not None:
                instances = list(self.render_override(value, context, list(contents)))
            else:
                instances = [cast("T", self._unmarshal(doc, bp)) for doc, bp in pairs]
        except StencilError as e:
            error = e
        except Exception as e:  # noqa: BLE001
            error = self._unexpected(e)
        else:
            self.logger.debug("component_rendered", documents=len(contents))
            return MultiRenderResult(instances=instances, contents=contents)

        self._report(error)
        return MultiRenderResult(contents=contents, error=error)


def _load_template(
    name: str, template: str | Path, *, template_is_file: bool
) -> tuple[str, tuple[Path, ...]]:
    """Return the template text and the directories its includes resolve from."""
    if not template_is_file and not isinstance(template, Path):
        return template, ()

    path = Path(template)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"failed to read template file {str(path)!r} of {name!r}: {e}"
        raise FileReadError(msg, path=path, component=name, cause=e) from e
    return text, (path.parent,)


def _preprocess(name: str, text: str, options: ComponentOptions) -> str:
    try:
        if options.preprocess_template is not None:
            return options.preprocess_template(text, options)
        return preprocess_template(text, tab_size=options.tab_size)
    except Exception as e:
        msg = f"failed to preprocess template of {name!r}: {e}"
        raise PreprocessError(msg, component=name, cause=e) from e


def _component_logger(name: str, options: ComponentOptions) -> FilteringBoundLogger:
    logger = options.logger if options.logger is not None else create_logger()
    return logger.bind(component=name)


def _frontload(component: Component[Any, Any] | MultiComponent[Any, Any]) -> None:  # pyright: ignore[reportExplicitAny]
    """Render once with the frontload input, raising the first error."""
    result = component.render(component.options.frontload_input)
    if result.error is not None:
        raise result.error from result.error.cause


def create_component[I, T](
    name: str,
    template: str | Path,
    *,
    schema: object = None,
    setup: SetupFn[I] | None = None,
    render: RenderFn[I, T] | None = None,
    template_is_file: bool = False,
    options: ComponentOptions | None = None,
) -> Component[I, T]:
    """Create a component that renders one document.

    The template is read (when it is a file) and preprocessed once, here.
    Every render then runs setup, renders the template and decodes the result
    into `schema`.

    Args:
        name: Component name used in errors and logs.
        template: Template text, or a path to a template file.
        schema: Type (or instance to merge into) the output is decoded into.
        setup: Turns the render input into the template context. Defaults
            to an empty context.
        render: Replaces decoding. Called with the input, the context and
            the rendered text; its return value becomes the instance.
        template_is_file: Treat a string template as a file path.
        options: Component options.

    Returns:
        The component.

    Raises:
        FileReadError: If the template file cannot be read.
        PreprocessError: If preprocessing fails.
        DefinitionError: If neither schema nor render is given.
        StencilError: If frontloading is enabled and the first render fails.

    Example:
        >>> deployment = create_component(
        ...     "deployment",
        ...     "kind: Deployment\\nmetadata:\\n  name: {{ Stencil.Name }}",
        ...     schema=Deployment,
        ...     setup=lambda name: {"Name": name},
        ... )
        >>> deployment.render("web").unwrap().metadata.name
        'web'
    """
    options = options if options is not None else ComponentOptions()
    text, search_paths = _load_template(name, template, template_is_file=template_is_file)
    text = _preprocess(name, text, options)

    if schema is None and render is None:
        msg = f"component {name!r} needs a schema or a render function"
        raise DefinitionError(msg, component=name)

    component: Component[I, T] = Component(
        name=name,
        template=text,
        setup=setup,
        options=options,
        search_paths=search_paths,
        logger=_component_logger(name, options),
        schema=schema,
        render_override=render,
    )
    component.logger.debug("component_created", kind="single")

    if options.frontload_enabled:
        _frontload(component)
    return component


def create_multi_component[I, T](
    name: str,
    template: str | Path,
    *,
    instances: Sequence[T] | InstancesFn[I, T] | None = None,
    setup: SetupFn[I] | None = None,
    render: MultiRenderFn[I, T] | None = None,
    template_is_file: bool = False,
    options: ComponentOptions | None = None,
) -> MultiComponent[I, T]:
    """Create a component that renders several documents.

    The rendered output is split on `options.multi_doc_separator`. Each
    document is decoded into the instance declared at the same position.

    Args:
        name: Component name used in errors and logs.
        template: Template text, or a path to a template file.
        instances: One blueprint per document, or a function of
            (input, context) returning them.
        setup: Turns the render input into the template context. Defaults
            to an empty context.
        render: Replaces decoding. Called with the input, the context and
            the documents; its return value becomes the instances. When
            instances is omitted, document counts are not checked.
        template_is_file: Treat a string template as a file path.
        options: Component options.

    Returns:
        The component.

    Raises:
        FileReadError: If the template file cannot be read.
        PreprocessError: If preprocessing fails.
        DefinitionError: If neither instances nor render is given.
        StencilError: If frontloading is enabled and the first render fails.
    """
    options = options if options is not None else ComponentOptions()
    text, search_paths = _load_template(name, template, template_is_file=template_is_file)
    text = _preprocess(name, text, options)

    if instances is None and render is None:
        msg = f"component {name!r} needs instances or a render function"
        raise DefinitionError(msg, component=name)

    component: MultiComponent[I, T] = MultiComponent(
        name=name,
        template=text,
        setup=setup,
        options=options,
        search_paths=search_paths,
        logger=_component_logger(name, options),
        instances=instances,
        render_override=render,
    )
    component.logger.debug("component_created", kind="multi")

    if options.frontload_enabled:
        _frontload(component)
    return component
