"""
Qualitative line colors. Series at position s gets PALETTE[s % 8] (ColorBrewer Dark2),
so colors repeat after 8 series.
"""

import matplotlib
from matplotlib.colors import to_hex

PALETTE_SIZE = 8

PALETTE: tuple[str, ...] = tuple(to_hex(c) for c in matplotlib.colormaps["Dark2"].colors)


def color(series_index: int, palette_size: int = PALETTE_SIZE) -> str:
    """
    Hex color for the series at series_index.
    palette_size is clamped to 1..len(PALETTE), so every call returns a color.
    """
    size = min(max(palette_size, 1), len(PALETTE))
    return PALETTE[series_index % size]
