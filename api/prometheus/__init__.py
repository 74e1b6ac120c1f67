"""Prometheus HTTP API client."""

from api.prometheus.client import (
    DEFAULT_NUM_POINTS,
    Matrix,
    TimeSeries,
    get_metrics,
)

__all__ = [
    "DEFAULT_NUM_POINTS",
    "Matrix",
    "TimeSeries",
    "get_metrics",
]
