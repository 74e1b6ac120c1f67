"""
Clients for the services promplot talks to: Prometheus (query) and Slack (upload).
"""

from api.errors import (
    FetchError,
    PromplotError,
    RenderError,
    SinkError,
    UnsupportedFormatError,
    ValueParseError,
)

__all__ = [
    "FetchError",
    "PromplotError",
    "RenderError",
    "SinkError",
    "UnsupportedFormatError",
    "ValueParseError",
]
