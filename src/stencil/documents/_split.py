"""Splitting rendered output into documents and pairing them with instances."""

from collections.abc import Sequence

from stencil.exceptions import CountMismatchError

DEFAULT_SEPARATOR = "---"


def split_documents(rendered: str, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    """Split rendered text into documents.

    A line separates documents when, ignoring surrounding whitespace, it
    consists of the separator and nothing else. Separator lines are dropped.
    Text before the first or after the last separator is kept as a document
    even when empty, so the result always has one more element than there
    are separator lines.

    Args:
        rendered: Rendered template output.
        separator: Document separator.

    Returns:
        The documents, at least one.

    Raises:
        ValueError: If the separator is blank.
    """
    marker = separator.strip()
    if not marker:
        msg = "document separator must not be blank"
        raise ValueError(msg)

    documents: list[str] = []
    current: list[str] = []
    for line in rendered.split("\n"):
        if line.strip() == marker:
            documents.append("\n".join(current))
            current = []
        else:
            current.append(line)
    documents.append("\n".join(current))
    return documents


def match_instances[T](
    documents: Sequence[str],
    instances: Sequence[T],
    *,
    component: str = "",
) -> list[tuple[str, T]]:
    """Pair each document with the instance declared for it.

    Args:
        documents: Documents returned by split_documents.
        instances: Declared instance blueprints, one per document.
        component: Component name used in error messages.

    Returns:
        (document, instance) pairs in order.

    Raises:
        CountMismatchError: If the counts differ.
    """
    if len(documents) != len(instances):
        msg = (
            f"found {len(documents)} documents in the template of {component!r}, "
            f"but there are {len(instances)} instances to decode the data into. "
            "These must match. Review the component's `instances` and the template"
        )
        raise CountMismatchError(
            msg, expected=len(instances), found=len(documents), component=component
        )
    return list(zip(documents, instances, strict=True))
