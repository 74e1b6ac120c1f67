"""
Chart composition and rendering for Prometheus range-query results.
compose() builds the matplotlib chart; render() turns it into image bytes.
"""

from visualization.labels import extract_label
from visualization.palette import PALETTE, color
from visualization.plotter import Chart, compose, plot_to_bytes
from visualization.renderer import FORMATS, render

__all__ = [
    "FORMATS",
    "PALETTE",
    "Chart",
    "color",
    "compose",
    "extract_label",
    "plot_to_bytes",
    "render",
]
