"""Template text normalization applied before parsing."""

import re

from stencil.exceptions import PreprocessError

_LEADING_BLANK_LINES = re.compile(r"\A(?:\s*\n)+")
_TRAILING_BLANK_LINES = re.compile(r"(?:\n\s*)+\Z")


def trim_template(template: str) -> str:
    """Remove leading and trailing blank lines.

    Indentation of the first and last non-blank lines is preserved.

    Args:
        template: Raw template text.

    Returns:
        The template without surrounding blank lines.
    """
    for pattern in (_LEADING_BLANK_LINES, _TRAILING_BLANK_LINES):
        template = pattern.sub("", template)
    return template


def unindent(text: str) -> str:
    """Remove the common leading spaces from every line.

    The indent is the smallest number of leading spaces across all non-blank
    lines. Blank lines shorter than the indent become empty.

    Args:
        text: Text to unindent.

    Returns:
        The unindented text, or the input unchanged if every line is blank.
    """
    lines = text.split("\n")

    indents = [len(line) - len(line.lstrip(" ")) for line in lines if line.strip()]
    if not indents:
        return text

    smallest = min(indents)
    return "\n".join(line[smallest:] for line in lines)


def preprocess_template(template: str, *, tab_size: int | None = None) -> str:
    """Normalize a template before it is parsed.

    Strips surrounding blank lines, optionally expands tabs (YAML does not
    allow tabs for indentation), then unindents, so templates can be written
    as indented triple-quoted strings.

    Args:
        template: Raw template text.
        tab_size: Number of spaces each tab is replaced with. None leaves
            tabs untouched.

    Returns:
        The normalized template.

    Raises:
        PreprocessError: If tab_size is negative.
    """
    if tab_size is not None and tab_size < 0:
        msg = f"tab_size must be a non-negative integer, got {tab_size}"
        raise PreprocessError(msg)

    template = trim_template(template)

    if tab_size is not None:
        template = template.replace("\t", " " * tab_size)

    return unindent(template)
