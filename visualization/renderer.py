"""
Rasterize a composed chart into image bytes.
Fixed 24 x 20 cm canvas with a 6 mm margin on every side.
"""

import io
import logging
import os
from contextlib import contextmanager
from typing import TYPE_CHECKING

import matplotlib

from api.errors import RenderError, UnsupportedFormatError

if TYPE_CHECKING:
    from visualization.plotter import Chart

logger = logging.getLogger(__name__)

CM_PER_INCH = 2.54

WIDTH_CM = 24.0
HEIGHT_CM = 20.0
MARGIN_CM = 0.6
FIGSIZE = (WIDTH_CM / CM_PER_INCH, HEIGHT_CM / CM_PER_INCH)
MARGIN_IN = MARGIN_CM / CM_PER_INCH

DPI = 96

# Format token -> matplotlib savefig format
FORMATS = {
    "eps": "eps",
    "jpg": "jpg",
    "jpeg": "jpeg",
    "pdf": "pdf",
    "png": "png",
    "svg": "svg",
    "tif": "tiff",
    "tiff": "tiff",
}

# Drop timestamps so identical charts encode to identical bytes
_METADATA = {
    "svg": {"Date": None},
    "pdf": {"CreationDate": None},
}

_RC = {"svg.hashsalt": "promplot"}

# The PS backend ignores metadata dates and stamps %%CreationDate from this variable or the clock
_PS_FORMATS = ("eps",)
_PS_CREATION_EPOCH = "0"


@contextmanager
def _fixed_creation_date(savefig_format: str):
    if savefig_format not in _PS_FORMATS:
        yield
        return
    previous = os.environ.get("SOURCE_DATE_EPOCH")
    os.environ["SOURCE_DATE_EPOCH"] = _PS_CREATION_EPOCH
    try:
        yield
    finally:
        if previous is None:
            del os.environ["SOURCE_DATE_EPOCH"]
        else:
            os.environ["SOURCE_DATE_EPOCH"] = previous


def _savefig_format(fmt: str) -> str:
    try:
        return FORMATS[fmt.lower()]
    except KeyError:
        raise UnsupportedFormatError(
            f"unsupported image format {fmt!r}; expected one of {sorted(FORMATS)}"
        ) from None


def render(chart: "Chart", fmt: str) -> bytes:
    """
    Draw chart at the fixed canvas size and encode it as fmt.

    Raises:
        UnsupportedFormatError: fmt is not one of FORMATS (checked before drawing).
        RenderError: drawing or encoding failed.
    """
    savefig_format = _savefig_format(fmt)
    fig = chart.figure
    buf = io.BytesIO()
    kwargs = {"format": savefig_format, "dpi": DPI}
    if savefig_format in _METADATA:
        kwargs["metadata"] = _METADATA[savefig_format]
    try:
        fig.set_size_inches(*FIGSIZE)
        fig.set_layout_engine("constrained", w_pad=MARGIN_IN, h_pad=MARGIN_IN, wspace=0, hspace=0)
        with matplotlib.rc_context(_RC), _fixed_creation_date(savefig_format):
            fig.savefig(buf, **kwargs)
    except Exception as e:
        raise RenderError(f"failed rendering {fmt} image: {e}") from e

    data = buf.getvalue()
    logger.debug("rendered %s image, %s bytes", savefig_format, len(data))
    return data
