from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Optional

import pytest
import requests

# Ensure the repository's src/ is importable
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, *, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeSession:
    """Records requests and replays queued responses (or raises queued errors)."""

    def __init__(self, *responses: Any) -> None:
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []
        self._responses = list(responses)

    def _next(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, **kwargs)


class CountingFetcher:
    def __init__(self, results: Optional[Dict[str, Any]] = None, default: Any = None) -> None:
        self.results = results or {}
        self.default = default
        self.calls: List[str] = []

    def __call__(self, url: str) -> Any:
        self.calls.append(url)
        result = self.results.get(url, self.default)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def counting_fetcher():
    return CountingFetcher


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
