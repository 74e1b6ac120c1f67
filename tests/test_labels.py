"""Legend text extraction from metric label strings."""

from __future__ import annotations

import pytest

from visualization.labels import extract_label


def test_extract_label_returns_text_inside_braces() -> None:
    """Everything between the braces is kept verbatim."""

    assert extract_label('metric_name{job="x",instance="y"}') == 'job="x",instance="y"'
    assert extract_label('{a="1"}') == 'a="1"'


def test_extract_label_without_braces_returns_none() -> None:
    """No brace pair means no legend entry."""

    assert extract_label("up") is None
    assert extract_label("") is None
    assert extract_label("up{unterminated") is None
    assert extract_label("up}{") is None


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("a{b{c}d}", "b{c"),
        ('x{a="1"}{b="2"}', 'a="1"'),
        ("x{}", ""),
    ],
)
def test_extract_label_stops_at_first_closing_brace(label: str, expected: str) -> None:
    """The first "{" pairs with the first "}" after it, no nesting."""

    assert extract_label(label) == expected
