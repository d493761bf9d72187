"""
BigQuery sink for daily weather records.

The sink owns the BigQuery client for the lifetime of one request: the
client is built on ``__enter__`` and always closed on ``__exit__``. Writes
go through the streaming ``insertAll`` API in a single call.

Partial-failure policy: the request is all-or-nothing from the caller's
point of view. ``skip_invalid_rows`` stays off so BigQuery rejects the whole
payload when any row is invalid, and any per-row error is reported as
``InsertFailed`` with no success count.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import bigquery

from weather_history.errors import InsertFailed, SinkUnavailable
from weather_history.models.records import WeatherRecord
from weather_history.utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="bigquery_sink")

DEFAULT_PROJECT = "dataform-intro-469416"
DEFAULT_DATASET = "weather_dataset"
DEFAULT_TABLE = "daily_weather"
MAX_LOGGED_ROW_ERRORS = 5

WEATHER_TABLE_SCHEMA = [
    bigquery.SchemaField("latitude", "FLOAT64"),
    bigquery.SchemaField("longitude", "FLOAT64"),
    bigquery.SchemaField("date", "STRING"),
    bigquery.SchemaField("mean_temperature", "FLOAT64"),
    bigquery.SchemaField("min_temperature", "FLOAT64"),
    bigquery.SchemaField("max_temperature", "FLOAT64"),
    bigquery.SchemaField("rain_sum", "FLOAT64"),
    bigquery.SchemaField("snowfall_sum", "FLOAT64"),
    bigquery.SchemaField("inserted_at", "TIMESTAMP"),
]


def _as_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class BigQuerySinkConfig:
    """Destination table and write options."""

    project: str = DEFAULT_PROJECT
    dataset: str = DEFAULT_DATASET
    table: str = DEFAULT_TABLE
    dedupe_rows: bool = False

    @property
    def table_id(self) -> str:
        return f"{self.project}.{self.dataset}.{self.table}"


class BigQuerySink:
    """Append-only writer for the daily weather table."""

    def __init__(
        self,
        config: BigQuerySinkConfig,
        *,
        client_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.config = config
        self._client_factory = client_factory or bigquery.Client
        self._client = None

    def __enter__(self) -> "BigQuerySink":
        logger.info(f"Opening BigQuery client for project '{self.config.project}'")
        try:
            self._client = self._client_factory(project=self.config.project)
        except (GoogleAuthError, GoogleAPIError, OSError, ValueError) as exc:
            logger.error(f"Failed to create BigQuery client: {exc}")
            raise SinkUnavailable(f"Failed to create BigQuery client: {exc}") from exc
        return self

    def __exit__(self, *exc_info) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError("BigQuerySink must be entered before use")
        return self._client

    # --- Writes --------------------------------------------------------------
    def insert_records(self, records: Sequence[WeatherRecord]) -> int:
        """Append ``records`` in one streaming insert and return the row count."""
        if not records:
            logger.warning("No weather records to insert")
            return 0

        table_id = self.config.table_id
        rows = [record.to_row() for record in records]
        row_ids = [record.row_key() for record in records] if self.config.dedupe_rows else None

        logger.info(f"Inserting {len(rows)} rows into {table_id}")
        try:
            errors = self.client.insert_rows_json(
                table_id,
                rows,
                row_ids=row_ids,
                skip_invalid_rows=False,
            )
        except GoogleAPIError as exc:
            logger.error(f"BigQuery insert into {table_id} failed: {exc}")
            raise InsertFailed(f"BigQuery insert into {table_id} failed: {exc}") from exc

        if errors:
            logger.error(
                "BigQuery rejected %d of %d rows; first errors: %s",
                len(errors),
                len(rows),
                errors[:MAX_LOGGED_ROW_ERRORS],
            )
            raise InsertFailed(
                f"BigQuery reported errors for {len(errors)} of {len(rows)} rows in {table_id}"
            )

        logger.info(f"Inserted {len(rows)} rows into {table_id}")
        return len(rows)

    # --- Bootstrap -----------------------------------------------------------
    def ensure_table(self):
        """Create the destination table if it does not already exist."""
        table = bigquery.Table(self.config.table_id, schema=WEATHER_TABLE_SCHEMA)
        logger.info(f"Ensuring table {self.config.table_id} exists")
        return self.client.create_table(table, exists_ok=True)


def make_bigquery_sink_from_env(
    client_factory: Optional[Callable[..., Any]] = None,
) -> BigQuerySink:
    """Construct the sink using environment overrides."""
    config = BigQuerySinkConfig(
        project=os.getenv("GCP_PROJECT", DEFAULT_PROJECT),
        dataset=os.getenv("BQ_DATASET", DEFAULT_DATASET),
        table=os.getenv("BQ_TABLE", DEFAULT_TABLE),
        dedupe_rows=_as_bool(os.getenv("BQ_DEDUPE_ROWS")),
    )
    return BigQuerySink(config, client_factory=client_factory)
