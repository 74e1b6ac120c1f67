"""
Compose a Prometheus range-query matrix into a matplotlib line chart.
One line per series, colored by position; legend from the series' label sets.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timezone

import matplotlib
matplotlib.use("Agg")  # headless backend (no display)
import matplotlib.dates as mdates
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.font_manager import FontProperties
from matplotlib.lines import Line2D
from matplotlib.ticker import FuncFormatter
from matplotlib.transforms import offset_copy
import numpy as np

from api.errors import ValueParseError
from api.prometheus import TimeSeries
from visualization.labels import extract_label
from visualization.palette import color
from visualization.renderer import FIGSIZE, render

logger = logging.getLogger(__name__)

POINTS_PER_CM = 72 / 2.54

FONT_FAMILY = "DejaVu Sans"  # bundled with matplotlib
TITLE_FONT_SIZE = 1.0 * POINTS_PER_CM
TITLE_PAD = 2.0 * POINTS_PER_CM
TEXT_FONT_SIZE = 0.3 * POINTS_PER_CM
LEGEND_Y_OFFSET = 1.5 * POINTS_PER_CM
LINE_WIDTH = 1.0

TIME_TICK_FORMAT = "%Y-%m-%d\n%H:%M"
SECONDS_PER_DAY = 86400

_TICK_DATES = mdates.DateFormatter(TIME_TICK_FORMAT, tz=timezone.utc)


@dataclass
class Chart:
    """A composed chart, ready to render."""

    figure: Figure
    axes: Axes
    lines: list[Line2D] = field(default_factory=list)
    legend_entries: list[tuple[str, Line2D]] = field(default_factory=list)

    def close(self) -> None:
        plt.close(self.figure)


def _title_font() -> FontProperties:
    return FontProperties(family=FONT_FAMILY, weight="bold", size=TITLE_FONT_SIZE)


def _text_font() -> FontProperties:
    return FontProperties(family=FONT_FAMILY, size=TEXT_FONT_SIZE)


def _format_time_tick(x: float, pos: int | None = None) -> str:
    """Unix seconds -> 'YYYY-MM-DD\\nHH:MM' (UTC)."""
    # X stays in unix seconds; DateFormatter expects days since the matplotlib epoch (1970)
    return _TICK_DATES(x / SECONDS_PER_DAY, pos)


def _points(series: TimeSeries) -> tuple[np.ndarray, np.ndarray]:
    """X (unix seconds) and Y (parsed values) of one series as float arrays."""
    ys = []
    for _, value in series.values:
        try:
            ys.append(float(value))
        except (TypeError, ValueError):
            raise ValueParseError(f"sample value not float: {value!r}") from None
    xs = np.array([ts for ts, _ in series.values], dtype=float)
    return xs, np.array(ys, dtype=float)


def _style_axes(ax: Axes, title: str) -> None:
    ax.set_title(title, fontproperties=_title_font(), pad=TITLE_PAD, parse_math=False)
    ax.xaxis.set_major_formatter(FuncFormatter(_format_time_tick))
    ax.tick_params(labelsize=TEXT_FONT_SIZE, labelfontfamily=FONT_FAMILY)


def _add_legend(fig: Figure, ax: Axes, entries: list[tuple[str, Line2D]]) -> None:
    # Top right of the axes, raised so it sits between the title and the plot
    anchor = offset_copy(ax.transAxes, fig=fig, y=LEGEND_Y_OFFSET, units="points")
    legend = ax.legend(
        [line for _, line in entries],
        [label for label, _ in entries],
        loc="upper right",
        bbox_to_anchor=(1.0, 1.0),
        bbox_transform=anchor,
        prop=_text_font(),
        frameon=False,
    )
    # Label values are literal text; "$" must not start mathtext
    for text in legend.get_texts():
        text.set_parse_math(False)


def compose(matrix: Sequence[TimeSeries], title: str) -> Chart:
    """
    Build the chart for all series in matrix.

    Args:
        matrix: Series in plotting order; position i is drawn in color(i).
        title: Chart title.

    Returns:
        Chart holding the figure, its lines (matrix order) and legend entries.
        Legend entries are only added when matrix has more than one series.

    Raises:
        ValueParseError: a sample value is not a float. No chart is returned.
    """
    fig, ax = plt.subplots(figsize=FIGSIZE)
    try:
        _style_axes(ax, title)
        chart = Chart(figure=fig, axes=ax)
        with_legend = len(matrix) > 1

        for s, series in enumerate(matrix):
            xs, ys = _points(series)
            (line,) = ax.plot(xs, ys, linestyle="-", marker="None", linewidth=LINE_WIDTH, color=color(s))
            chart.lines.append(line)
            if with_legend:
                text = extract_label(series.label)
                if text is not None:
                    chart.legend_entries.append((text, line))
            logger.debug("series %s: %s points", s, len(xs))

        if chart.legend_entries:
            _add_legend(fig, ax, chart.legend_entries)
    except Exception:
        plt.close(fig)
        raise
    return chart


def plot_to_bytes(matrix: Sequence[TimeSeries], title: str, fmt: str = "png") -> bytes:
    """Compose and render the chart to image bytes in fmt (e.g. "png", "svg")."""
    chart = compose(matrix, title)
    try:
        return render(chart, fmt)
    finally:
        chart.close()
