"""Render results."""

from dataclasses import dataclass, field
from typing import cast

from stencil.exceptions import StencilError


@dataclass(frozen=True, slots=True)
class RenderResult[T]:
    """Result of rendering a single-document component.

    Attributes:
        instance: The decoded value, or None if rendering failed.
        content: The rendered text. On failure, whatever was rendered before
            the error (empty if the template never executed).
        error: The failure, or None on success.
    """

    instance: T | None = None
    content: str = ""
    error: StencilError | None = None

    @property
    def success(self) -> bool:
        """Whether the render completed without error."""
        return self.error is None

    def unwrap(self) -> T:
        """Return the instance, raising the error if the render failed."""
        if self.error is not None:
            raise self.error
        return cast("T", self.instance)


@dataclass(frozen=True, slots=True)
class MultiRenderResult[T]:
    """Result of rendering a multi-document component.

    Attributes:
        instances: The decoded values, one per document. Empty if rendering
            failed.
        contents: The rendered documents. On failure, whatever was produced
            before the error.
        error: The failure, or None on success.
    """

    instances: list[T] = field(default_factory=list)
    contents: list[str] = field(default_factory=list)
    error: StencilError | None = None

    @property
    def success(self) -> bool:
        """Whether the render completed without error."""
        return self.error is None

    def unwrap(self) -> list[T]:
        """Return the instances, raising the error if the render failed."""
        if self.error is not None:
            raise self.error
        return self.instances
