"""
Error types raised along the fetch -> plot -> render -> deliver path.
Every one of them is fatal to a promplot run; the CLI reports it and exits 1.
"""


class PromplotError(Exception):
    """Base class for all promplot failures."""


class FetchError(PromplotError):
    """Prometheus query failed (transport, HTTP status, or query error)."""


class ValueParseError(PromplotError, ValueError):
    """A sample value could not be parsed as a float."""


class UnsupportedFormatError(PromplotError, ValueError):
    """Requested image format is not one the renderer can produce."""


class RenderError(PromplotError):
    """Drawing or encoding the chart failed."""


class SinkError(PromplotError):
    """Writing the image to a file or uploading it failed."""
