"""Rendering configuration model.

Defaults applied to every component created with options derived from
configuration.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class RenderingConfig(BaseModel):
    """Rendering configuration section.

    Attributes:
        multi_doc_separator: Line that separates documents in multi-document
            templates.
        tab_size: Number of spaces each tab expands to during preprocessing.
            None leaves tabs untouched.
        strict_undefined: Fail renders that reference undefined variables.
        namespace: Top-level template name the context variables live under.
        panic_on_error: Raise render errors instead of returning them.
        frontload_enabled: Render every component once at creation.
        trim_blocks: Remove first newline after a block tag.
        lstrip_blocks: Strip leading whitespace before block tags.
        keep_trailing_newline: Preserve trailing newline in templates.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    multi_doc_separator: str = Field(default="---", min_length=1)
    tab_size: int | None = Field(default=None, ge=0)
    strict_undefined: bool = False
    namespace: str = Field(default="Stencil", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    panic_on_error: bool = False
    frontload_enabled: bool = False
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True
