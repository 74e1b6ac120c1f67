"""Series color assignment."""

from __future__ import annotations

import pytest

from visualization.palette import PALETTE, PALETTE_SIZE, color


def test_palette_has_eight_distinct_colors() -> None:
    """Dark2 qualitative palette: 8 distinct hex colors."""

    assert PALETTE_SIZE == 8
    assert len(PALETTE) == 8
    assert len(set(PALETTE)) == 8
    assert all(c.startswith("#") and len(c) == 7 for c in PALETTE)


def test_color_wraps_every_eight_series() -> None:
    """color(i) repeats with period 8."""

    for i in range(40):
        assert color(i) == color(i + 8)
        assert color(i) == PALETTE[i % 8]


def test_color_first_series_is_first_palette_entry() -> None:
    assert color(0) == PALETTE[0] == "#1b9e77"
    assert color(1) == "#d95f02"


def test_color_smaller_palette_size() -> None:
    assert color(3, palette_size=3) == PALETTE[0]


@pytest.mark.parametrize(("size", "expected"), [(0, PALETTE[0]), (-3, PALETTE[0]), (9, PALETTE[5]), (100, PALETTE[5])])
def test_color_clamps_palette_size(size: int, expected: str) -> None:
    """Out-of-range palette sizes still map to a palette color."""

    assert color(5, palette_size=size) == expected
