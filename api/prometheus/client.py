"""
Prometheus HTTP API client.
Runs a range query (/api/v1/query_range) and returns the result matrix as TimeSeries.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import requests

from api.errors import FetchError

logger = logging.getLogger(__name__)

QUERY_RANGE_PATH = "/api/v1/query_range"

# Number of data points requested per series
DEFAULT_NUM_POINTS = 100


@dataclass
class TimeSeries:
    """One series of a range query: its label set and (unix seconds, raw value) samples."""

    metric: dict[str, str] = field(default_factory=dict)
    values: list[tuple[int, str]] = field(default_factory=list)

    @property
    def label(self) -> str:
        """
        Metric rendered the way Prometheus prints it, e.g. 'up{instance="a:9100", job="node"}'.
        Labels are sorted by name; the name part is omitted when __name__ is missing.
        """
        name = self.metric.get("__name__", "")
        labels = sorted((k, v) for k, v in self.metric.items() if k != "__name__")
        if not labels:
            return name or "{}"
        inner = ", ".join(f"{k}={json.dumps(v, ensure_ascii=False)}" for k, v in labels)
        return f"{name}{{{inner}}}"


Matrix = list[TimeSeries]


def _parse_matrix(result: list[dict]) -> Matrix:
    """Convert the "result" list of a matrix response into TimeSeries, keeping order."""
    matrix: Matrix = []
    for item in result:
        values = [(int(float(ts)), str(val)) for ts, val in item.get("values", [])]
        matrix.append(TimeSeries(metric=dict(item.get("metric", {})), values=values))
    return matrix


def get_metrics(
    server_url: str,
    query: str,
    query_time: datetime,
    duration: timedelta,
    num_points: int = DEFAULT_NUM_POINTS,
    *,
    timeout: float = 30,
) -> Matrix:
    """
    Run a PromQL range query ending at query_time and looking back duration.

    Args:
        server_url: Base URL of the Prometheus server (e.g. "http://localhost:9090").
        query: PromQL expression.
        query_time: End of the range (evaluation time).
        duration: How far to look back from query_time.
        num_points: Approximate number of samples per series; sets the query step.
        timeout: HTTP timeout in seconds.

    Returns:
        Matrix (list of TimeSeries) in the order returned by Prometheus.

    Raises:
        FetchError: transport failure, HTTP error, or a non-matrix/unsuccessful response.
    """
    if num_points <= 0:
        raise ValueError("num_points must be positive")
    seconds = duration.total_seconds()
    if seconds <= 0:
        raise ValueError("duration must be positive")

    end = query_time.timestamp()
    params = {
        "query": query,
        "start": f"{end - seconds:.3f}",
        "end": f"{end:.3f}",
        "step": f"{seconds / num_points:g}",
    }
    url = server_url.rstrip("/") + QUERY_RANGE_PATH

    try:
        resp = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Prometheus request failed url=%s: %s", url, e)
        raise FetchError(f"request to {url} failed: {e}") from e

    try:
        data = resp.json()
    except ValueError:
        data = None

    if not isinstance(data, dict):
        logger.warning("Prometheus non-JSON response url=%s status=%s", url, resp.status_code)
        raise FetchError(f"unexpected response from {url} (HTTP {resp.status_code})")

    if resp.status_code >= 400 or data.get("status") != "success":
        error = data.get("error") or f"HTTP {resp.status_code}"
        error_type = data.get("errorType")
        logger.warning(
            "Prometheus query failed url=%s status=%s errorType=%s",
            url,
            resp.status_code,
            error_type,
        )
        raise FetchError(f"{error_type}: {error}" if error_type else error)

    payload = data.get("data") or {}
    result_type = payload.get("resultType")
    if result_type != "matrix":
        raise FetchError(f"expected matrix result, got {result_type!r}")

    matrix = _parse_matrix(payload.get("result") or [])
    logger.info("Prometheus query=%s step=%s n_series=%s", query, params["step"], len(matrix))
    return matrix
