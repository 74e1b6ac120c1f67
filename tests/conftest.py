"""Shared fixtures: sample matrices and a fake requests response."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest
import requests

from api.prometheus import TimeSeries


class FakeResponse:
    """Stand-in for requests.Response with a JSON body."""

    def __init__(self, body=None, status_code: int = 200) -> None:
        self._body = body
        self.status_code = status_code

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def two_series() -> list[TimeSeries]:
    return [
        TimeSeries(metric={"a": "1"}, values=[(0, "1.0"), (60, "2.0"), (120, "1.5")]),
        TimeSeries(metric={"a": "2"}, values=[(0, "0.5"), (60, "0.7"), (120, "0.6")]),
    ]


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def fake_response():
    return FakeResponse
