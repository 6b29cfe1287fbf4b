"""Preserving second-stage template actions through a render.

Templates that produce input for another template system (for example Helm
chart templates) write the downstream actions as `{{! .Values.x }}`. Those
actions are swapped for placeholder tokens before rendering and restored,
with the `!` marker removed, afterwards.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass

ESCAPE_MARKER = "{{!"
SLOT_PREFIX = "__stencil_slot_"

_ESCAPED_ACTION = re.compile(r"\{\{!(.*?)\}\}", re.DOTALL)


@dataclass(frozen=True, slots=True)
class EscapedTemplate:
    """A template with its escaped actions swapped for placeholder tokens.

    Attributes:
        text: Template text containing placeholder tokens.
        slots: Mapping of placeholder token to the original action with the
            escape marker removed.
    """

    text: str
    slots: Mapping[str, str]


def _unique_prefix(template: str) -> str:
    prefix = SLOT_PREFIX
    while prefix in template:
        prefix = f"_{prefix}"
    return prefix


def escape_actions(template: str) -> EscapedTemplate:
    """Replace every `{{! ... }}` action with a unique placeholder token.

    Tokens are numbered from zero in order of appearance. The token prefix is
    chosen so that no token occurs in the original template text.

    Args:
        template: Template text.

    Returns:
        EscapedTemplate with the substituted text and the token mapping.
    """
    prefix = _unique_prefix(template)
    slots: dict[str, str] = {}

    def replacer(match: re.Match[str]) -> str:
        token = f"{prefix}{len(slots)}__"
        slots[token] = "{{" + match.group(1) + "}}"
        return token

    text = _ESCAPED_ACTION.sub(replacer, template)
    return EscapedTemplate(text=text, slots=slots)


def unescape_actions(text: str, slots: Mapping[str, str]) -> str:
    """Put escaped actions back in place of their placeholder tokens.

    Args:
        text: Rendered text containing placeholder tokens.
        slots: Token mapping returned by escape_actions.

    Returns:
        The text with every token replaced by its original action.
    """
    if not slots:
        return text

    # Longest first so no token can shadow another that extends it
    tokens = sorted(slots, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    return pattern.sub(lambda match: slots[match.group(0)], text)
