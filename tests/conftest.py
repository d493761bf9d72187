"""Shared dummies and fixtures for unit tests.

Network and BigQuery access are replaced by small in-memory stand-ins:

Classes:
    _NullHandler: No-op logging handler for silencing loggers during tests.
    DummyResponse: Minimal ``requests.Response`` look-alike.
    DummySession: Records GET calls and returns a canned response or raises.
    DummyBigQueryClient: Records ``insert_rows_json``/``create_table`` calls.
    DummyClientFactory: Builds ``DummyBigQueryClient`` instances and tracks them.

Fixtures:
    archive_payload: Builder for Open-Meteo archive payloads of N days.
    make_response / make_session / make_bq_factory: The dummy classes above.
    bq_factory: A fresh ``DummyClientFactory``.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import pytest


class _NullHandler(logging.Handler):
    """Configure logging so tests don't try writing to pytest's closed streams."""

    def emit(self, record):  # pragma: no cover
        pass


root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
root_logger.handlers = [_NullHandler()]


# ---------------------------------------------------------------------------
# HTTP stand-ins
# ---------------------------------------------------------------------------

class DummyResponse:
    """Response with a status code and either a JSON payload or raw text."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text if payload is None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class DummySession:
    """Stand-in for ``requests.Session`` that works with ``configure_session``."""

    def __init__(self, response: Optional[DummyResponse] = None, exc: Optional[Exception] = None):
        self.headers: Dict[str, str] = {}
        self.mounted: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self._response = response
        self._exc = exc

    def mount(self, prefix, adapter):
        self.mounted[prefix] = adapter

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self._exc is not None:
            raise self._exc
        return self._response

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def close(self):
        self.closed = True


# ---------------------------------------------------------------------------
# BigQuery stand-ins
# ---------------------------------------------------------------------------

class DummyBigQueryClient:
    """Records writes; returns configured row errors or raises."""

    def __init__(self, project=None, errors=None, exc: Optional[Exception] = None):
        self.project = project
        self.inserts: List[Dict[str, Any]] = []
        self.created: List[Any] = []
        self.closed = False
        self._errors = errors or []
        self._exc = exc

    def insert_rows_json(self, table, json_rows, row_ids=None, skip_invalid_rows=None):
        self.inserts.append(
            {
                "table": table,
                "rows": list(json_rows),
                "row_ids": row_ids,
                "skip_invalid_rows": skip_invalid_rows,
            }
        )
        if self._exc is not None:
            raise self._exc
        return self._errors

    def create_table(self, table, exists_ok=False):
        self.created.append((table, exists_ok))
        return table

    def close(self):
        self.closed = True


class DummyClientFactory:
    """Callable used as ``client_factory``; optionally fails on construction."""

    def __init__(self, errors=None, insert_exc=None, construct_exc=None):
        self.clients: List[DummyBigQueryClient] = []
        self._errors = errors
        self._insert_exc = insert_exc
        self._construct_exc = construct_exc

    def __call__(self, project=None):
        if self._construct_exc is not None:
            raise self._construct_exc
        client = DummyBigQueryClient(project=project, errors=self._errors, exc=self._insert_exc)
        self.clients.append(client)
        return client

    @property
    def inserts(self) -> List[Dict[str, Any]]:
        return [call for client in self.clients for call in client.inserts]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _build_archive_payload(days: int = 2, *, latitude: float = 40.7, longitude: float = -74.0) -> Dict[str, Any]:
    return {
        "latitude": latitude,
        "longitude": longitude,
        "generationtime_ms": 12.5,
        "timezone": "America/New_York",
        "daily_units": {"time": "iso8601", "temperature_2m_min": "°C"},
        "daily": {
            "time": [f"2024-01-{day + 1:02d}" for day in range(days)],
            "temperature_2m_min": [-2.0 + day for day in range(days)],
            "temperature_2m_max": [6.0 + day for day in range(days)],
            "temperature_2m_mean": [2.0 + day for day in range(days)],
            "rain_sum": [0.5 * day for day in range(days)],
            "snowfall_sum": [0.0 for _ in range(days)],
        },
    }


@pytest.fixture
def archive_payload():
    """Return a builder for archive payloads: ``archive_payload(days=3)``."""
    return _build_archive_payload


@pytest.fixture
def make_response():
    return DummyResponse


@pytest.fixture
def make_session():
    return DummySession


@pytest.fixture
def make_bq_factory():
    return DummyClientFactory


@pytest.fixture
def bq_factory():
    return DummyClientFactory()
