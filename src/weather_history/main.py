"""Cloud Function: load 20 years of daily weather for a location into BigQuery."""
from __future__ import annotations

import os

import functions_framework

from weather_history.handler import handle_request
from weather_history.utils.logging_utils import get_tagged_logger, setup_logging

setup_logging(level=os.getenv("LOG_LEVEL", "INFO"), job_name="fetch_weather_data")
logger = get_tagged_logger(__name__, tag="main")

TEXT_HEADERS = {"Content-Type": "text/plain; charset=utf-8"}


@functions_framework.http
def fetch_weather_data(request):
    """HTTP entry point. Expects ``latitude`` and ``longitude`` query parameters."""
    logger.info(f"Received {request.method} request with args={dict(request.args)}")
    body, status = handle_request(request.args)
    return body, status, TEXT_HEADERS
