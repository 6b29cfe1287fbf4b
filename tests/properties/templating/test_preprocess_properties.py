"""Property-based tests for template preprocessing.

- Idempotence: preprocessing a preprocessed template changes nothing
- Unindent: at least one non-blank line is left without leading spaces
- Trimming: the result never starts or ends with a blank line
"""

from hypothesis import given, strategies as st

from stencil.templating import preprocess_template, unindent

# =============================================================================
# Strategies
# =============================================================================

_LINE_ALPHABET = "abcxyz:-{} \t"

line = st.text(alphabet=_LINE_ALPHABET, max_size=20)

indented_line = st.builds(
    lambda depth, body: " " * depth + body,
    st.integers(min_value=0, max_value=8),
    line,
)

template = st.lists(indented_line, max_size=12).map("\n".join)

tab_size = st.none() | st.integers(min_value=0, max_value=8)


# =============================================================================
# Properties
# =============================================================================


@given(template, tab_size)
def test_preprocess_is_idempotent(text: str, size: int | None) -> None:
    once = preprocess_template(text, tab_size=size)

    assert preprocess_template(once, tab_size=size) == once


@given(template)
def test_unindent_leaves_a_line_at_column_zero(text: str) -> None:
    result = unindent(text)

    indents = [
        len(row) - len(row.lstrip(" ")) for row in result.split("\n") if row.strip()
    ]
    if indents:
        assert min(indents) == 0


@given(template)
def test_unindent_keeps_line_count(text: str) -> None:
    assert unindent(text).count("\n") == text.count("\n")


@given(template, tab_size)
def test_result_has_no_surrounding_blank_lines(text: str, size: int | None) -> None:
    result = preprocess_template(text, tab_size=size)
    rows = result.split("\n")

    if result.strip():
        assert rows[0].strip()
        assert rows[-1].strip()
