"""Chart composition: lines, colors, legend, and parse failures."""

from __future__ import annotations

import matplotlib.pyplot as plt
import pytest

from api.errors import ValueParseError
from api.prometheus import TimeSeries
from visualization.palette import PALETTE, color
from visualization.plotter import _format_time_tick, compose, plot_to_bytes
from visualization.renderer import FORMATS


def _series(n: int) -> list[TimeSeries]:
    return [
        TimeSeries(
            metric={"__name__": "up", "instance": f"host{i}:9100"},
            values=[(1700000000, str(i)), (1700000060, str(i + 1))],
        )
        for i in range(n)
    ]


@pytest.mark.parametrize("n", [1, 2, 8, 11])
def test_compose_draws_one_line_per_series_in_order(n: int) -> None:
    """n series -> n lines, colored by position."""

    chart = compose(_series(n), "Up")

    assert len(chart.lines) == n
    assert list(chart.axes.get_lines()) == chart.lines
    for i, line in enumerate(chart.lines):
        assert line.get_color() == color(i)
        assert list(line.get_ydata()) == [float(i), float(i + 1)]
        assert line.get_linewidth() == 1.0
        assert line.get_marker() in ("None", None, "")


def test_compose_uses_unix_seconds_for_x(two_series) -> None:
    chart = compose(two_series, "Test")

    assert list(chart.lines[0].get_xdata()) == [0.0, 60.0, 120.0]
    assert list(chart.lines[1].get_ydata()) == [0.5, 0.7, 0.6]


def test_compose_colors_wrap_after_eight_series() -> None:
    chart = compose(_series(10), "Up")

    assert chart.lines[8].get_color() == chart.lines[0].get_color()
    assert chart.lines[9].get_color() == chart.lines[1].get_color()


def test_compose_single_series_has_no_legend() -> None:
    """One series: the title names it, so no legend even with labels."""

    chart = compose(_series(1), "Up")

    assert chart.legend_entries == []
    assert chart.axes.get_legend() is None


def test_compose_multiple_series_legend_from_labels(two_series) -> None:
    chart = compose(two_series, "Test")

    assert [label for label, _ in chart.legend_entries] == ['a="1"', 'a="2"']
    assert [line for _, line in chart.legend_entries] == chart.lines
    legend = chart.axes.get_legend()
    assert legend is not None
    assert [t.get_text() for t in legend.get_texts()] == ['a="1"', 'a="2"']


def test_compose_series_without_labels_is_drawn_but_not_in_legend() -> None:
    matrix = [
        TimeSeries(metric={"__name__": "up"}, values=[(0, "1")]),
        TimeSeries(metric={"__name__": "up", "job": "node"}, values=[(0, "2")]),
    ]

    chart = compose(matrix, "Up")

    assert len(chart.lines) == 2
    assert chart.legend_entries == [('job="node"', chart.lines[1])]


def test_compose_legend_skipped_when_no_series_has_labels() -> None:
    matrix = [
        TimeSeries(metric={"__name__": "a"}, values=[(0, "1")]),
        TimeSeries(metric={"__name__": "b"}, values=[(0, "2")]),
    ]

    chart = compose(matrix, "Up")

    assert chart.legend_entries == []
    assert chart.axes.get_legend() is None


def test_compose_sets_title(two_series) -> None:
    chart = compose(two_series, "Requests per second")

    title = chart.axes.title
    assert title.get_text() == "Requests per second"
    assert title.get_fontweight() == "bold"


def test_compose_accepts_prometheus_special_floats() -> None:
    matrix = [TimeSeries(metric={"a": "1"}, values=[(0, "NaN"), (60, "+Inf"), (120, "-Inf")])]

    chart = compose(matrix, "Special")

    assert len(chart.lines[0].get_ydata()) == 3


def test_compose_unparseable_value_aborts_without_chart() -> None:
    """One bad value fails the whole chart; its figure is closed."""

    matrix = [
        TimeSeries(metric={"a": "1"}, values=[(0, "1.0")]),
        TimeSeries(metric={"a": "2"}, values=[(0, "1.0"), (60, "NaN-ish-garbage")]),
    ]
    before = plt.get_fignums()

    with pytest.raises(ValueParseError, match="NaN-ish-garbage"):
        compose(matrix, "Broken")

    assert plt.get_fignums() == before


def test_format_time_tick_is_utc_date_and_time() -> None:
    assert _format_time_tick(0) == "1970-01-01\n00:00"
    assert _format_time_tick(1700000000) == "2023-11-14\n22:13"


def test_plot_to_bytes_svg_scenario(two_series) -> None:
    """Two labeled series to SVG: two colored paths and both legend labels."""

    before = plt.get_fignums()

    svg = plot_to_bytes(two_series, "Test", "svg").decode("utf-8")

    assert svg.startswith("<?xml")
    assert "<svg" in svg
    assert PALETTE[0] in svg
    assert PALETTE[1] in svg
    for label in ('a="1"', 'a="2"'):
        assert label in svg or label.replace('"', "&quot;") in svg
    assert plt.get_fignums() == before


@pytest.mark.parametrize("fmt", sorted(FORMATS))
def test_plot_to_bytes_is_deterministic(two_series, fmt: str) -> None:
    first = plot_to_bytes(two_series, "Test", fmt)
    second = plot_to_bytes(two_series, "Test", fmt)

    assert first
    assert first == second


@pytest.mark.parametrize("title", ["Cost in $ per $ unit", "Spend $_$ total", r"Latency $\foo$ p99"])
def test_compose_title_with_dollar_signs_is_plain_text(title: str) -> None:
    """Titles are drawn literally, never as mathtext."""

    chart = compose(_series(1), title)

    assert chart.axes.title.get_text() == title
    assert chart.axes.title.get_parse_math() is False
    assert plot_to_bytes(_series(1), title, "png").startswith(b"\x89PNG")


def test_compose_label_with_dollar_signs_is_plain_text(two_series) -> None:
    """Regex-like label values ("^a$|^b_$") stay literal in the legend and render."""

    two_series[1].metric["path"] = "^a$|^b_$"

    chart = compose(two_series, "Routes")

    texts = chart.axes.get_legend().get_texts()
    assert [t.get_text() for t in texts] == ['a="1"', 'a="2", path="^a$|^b_$"']
    assert all(t.get_parse_math() is False for t in texts)
    assert plot_to_bytes(two_series, "Routes", "png").startswith(b"\x89PNG")


def test_format_time_tick_ignores_local_timezone(monkeypatch) -> None:
    monkeypatch.setenv("TZ", "America/New_York")

    assert _format_time_tick(86400 + 3600) == "1970-01-02\n01:00"
