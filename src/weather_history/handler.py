"""Request handling: validate coordinates, fetch, transform, insert."""
from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Tuple

from weather_history.clients.open_meteo_archive_client import (
    OpenMeteoArchiveClient,
    make_open_meteo_archive_client_from_env,
)
from weather_history.errors import ValidationError, WeatherIngestError
from weather_history.sinks.bigquery_sink import BigQuerySink, make_bigquery_sink_from_env
from weather_history.transform import build_weather_records
from weather_history.utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="handler")

HISTORY_YEARS = 20
SINK_NAME = "BigQuery"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def parse_coordinates(args: Mapping[str, Any]) -> Tuple[float, float]:
    """Read ``latitude``/``longitude`` from query args as finite floats."""
    lat_raw = args.get("latitude")
    lon_raw = args.get("longitude")
    if not lat_raw or not lon_raw:
        raise ValidationError(
            f"Missing latitude or longitude (latitude={lat_raw!r}, longitude={lon_raw!r})"
        )

    try:
        latitude = float(lat_raw)
        longitude = float(lon_raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Unparseable coordinates latitude={lat_raw!r}, longitude={lon_raw!r}",
            public_message="Invalid latitude or longitude",
        ) from exc

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValidationError(
            f"Non-finite coordinates latitude={lat_raw!r}, longitude={lon_raw!r}",
            public_message="Invalid latitude or longitude",
        )
    return latitude, longitude


def compute_date_window(today: date, years: int = HISTORY_YEARS) -> Tuple[str, str]:
    """Return ``(start_date, end_date)`` as ``YYYY-MM-DD`` covering ``years`` up to ``today``."""
    try:
        start = today.replace(year=today.year - years)
    except ValueError:
        # 29 February with no leap day in the target year rolls to 1 March.
        start = date(today.year - years, 3, 1)
    return start.isoformat(), today.isoformat()


def handle_request(
    args: Mapping[str, Any],
    *,
    client: Optional[OpenMeteoArchiveClient] = None,
    sink: Optional[BigQuerySink] = None,
    today: Optional[date] = None,
) -> Tuple[str, int]:
    """
    Run one ingest and return ``(body, status)``.

    Collaborators default to the environment-configured archive client and
    BigQuery sink; tests inject their own. Every ``WeatherIngestError`` is
    logged and mapped to its HTTP status here, and nowhere else.
    """
    owns_client = client is None
    try:
        latitude, longitude = parse_coordinates(args)
        start_date, end_date = compute_date_window(today or utc_today())

        if client is None:
            client = make_open_meteo_archive_client_from_env()
        archive = client.fetch_daily(latitude, longitude, start_date, end_date)
        records = build_weather_records(archive)

        sink = sink or make_bigquery_sink_from_env()
        with sink:
            inserted = sink.insert_records(records)
    except WeatherIngestError as exc:
        if exc.status_code >= 500:
            logger.error(f"Ingest failed ({type(exc).__name__}, {exc.status_code}): {exc}")
        else:
            logger.warning(f"Ingest ended early ({type(exc).__name__}, {exc.status_code}): {exc}")
        return exc.public_message, exc.status_code
    finally:
        if owns_client and client is not None:
            client.close()

    logger.info(
        f"Ingested {inserted} rows for lat={latitude}, lon={longitude} "
        f"({start_date} to {end_date})"
    )
    return f"Successfully inserted {inserted} rows into {SINK_NAME}", 200
