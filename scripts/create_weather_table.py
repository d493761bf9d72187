"""Create the BigQuery table the ingest function appends to.

Usage:
    python scripts/create_weather_table.py \
        --project <YOUR_PROJECT_ID> \
        --dataset weather_dataset \
        --table daily_weather
"""
import argparse
import os

from weather_history.sinks.bigquery_sink import (
    DEFAULT_DATASET,
    DEFAULT_PROJECT,
    DEFAULT_TABLE,
    BigQuerySink,
    BigQuerySinkConfig,
)
from weather_history.utils.logging_utils import get_tagged_logger, setup_logging

setup_logging(level=os.getenv("LOG_LEVEL", "INFO"), job_name="create_weather_table")
logger = get_tagged_logger(__name__, tag="create_weather_table")


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the daily weather table")
    parser.add_argument("--project", default=os.getenv("GCP_PROJECT", DEFAULT_PROJECT), help="GCP project ID")
    parser.add_argument("--dataset", default=os.getenv("BQ_DATASET", DEFAULT_DATASET), help="BQ dataset")
    parser.add_argument("--table", default=os.getenv("BQ_TABLE", DEFAULT_TABLE), help="BQ table")
    args = parser.parse_args()

    config = BigQuerySinkConfig(project=args.project, dataset=args.dataset, table=args.table)
    with BigQuerySink(config) as sink:
        table = sink.ensure_table()

    logger.info(f"Table ready: {table.full_table_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
