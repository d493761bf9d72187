"""Error taxonomy for the ingest pipeline.

Each error carries the HTTP status and the short client-facing message the
handler responds with. Details stay in the exception text and in the logs.
"""
from __future__ import annotations

from typing import Mapping, Optional


class WeatherIngestError(RuntimeError):
    """Base class for failures that terminate an ingest request."""

    status_code: int = 500
    public_message: str = "Internal error"


class ValidationError(WeatherIngestError):
    """Raised when the request's query parameters are missing or unusable."""

    status_code = 400
    public_message = "Missing latitude or longitude"

    def __init__(self, message: str, *, public_message: Optional[str] = None) -> None:
        super().__init__(message)
        if public_message is not None:
            self.public_message = public_message


class UpstreamUnavailable(WeatherIngestError):
    """Raised when the archive API cannot be reached at all."""

    public_message = "Failed to fetch data"


class UpstreamError(WeatherIngestError):
    """Raised when the archive API answers with a non-200 status."""

    public_message = "API error"

    def __init__(self, message: str, *, status_code: int, body: str) -> None:
        super().__init__(message)
        self.upstream_status = status_code
        self.body = body


class DecodeError(WeatherIngestError):
    """Raised when the archive API body is not the JSON we expect."""

    public_message = "Failed to parse data"


class NoDataError(WeatherIngestError):
    """Raised when the archive API returns no daily observations."""

    status_code = 204
    public_message = "No data available"


class MalformedUpstreamData(WeatherIngestError):
    """Raised when the daily arrays are not index-aligned."""

    public_message = "Failed to parse data"

    def __init__(self, lengths: Mapping[str, int]) -> None:
        detail = ", ".join(f"{name}={size}" for name, size in lengths.items())
        super().__init__(f"Daily series lengths differ: {detail}")
        self.lengths = dict(lengths)


class SinkUnavailable(WeatherIngestError):
    """Raised when the BigQuery client cannot be constructed."""

    public_message = "BigQuery error"


class InsertFailed(WeatherIngestError):
    """Raised when the bulk insert is rejected in whole or in part."""

    public_message = "Failed to store data"
