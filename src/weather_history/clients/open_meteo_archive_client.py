"""Client for the Open-Meteo historical weather (archive) API."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from weather_history.clients.http_session import configure_session
from weather_history.errors import DecodeError, NoDataError, UpstreamError, UpstreamUnavailable
from weather_history.models.archive import DAILY_VARIABLES, ArchiveResponse
from weather_history.utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_archive_client")

OPEN_METEO_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "weather-history/open-meteo-archive"
# Dates are resolved in the location's own timezone.
ARCHIVE_TIMEZONE = "auto"
# Truncated upstream bodies are enough to diagnose a failure.
MAX_LOGGED_BODY = 2000


@dataclass
class OpenMeteoArchiveClientConfig:
    """Configuration for OpenMeteoArchiveClient."""

    archive_url: str = OPEN_METEO_ARCHIVE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


class OpenMeteoArchiveClient:
    """Fetches daily history for one location with a single GET, no retries."""

    def __init__(
        self,
        config: OpenMeteoArchiveClientConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._session = configure_session(
            session or requests.Session(),
            headers={"User-Agent": self._config.user_agent},
            timeout_seconds=self._config.timeout_seconds,
        )

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def build_params(
        latitude: float,
        longitude: float,
        start_date: str,
        end_date: str,
    ) -> Dict[str, Any]:
        """Query parameters for a daily archive request."""
        return {
            "latitude": latitude,
            "longitude": longitude,
            "start_date": start_date,
            "end_date": end_date,
            "daily": ",".join(DAILY_VARIABLES),
            "timezone": ARCHIVE_TIMEZONE,
        }

    def fetch_daily(
        self,
        latitude: float,
        longitude: float,
        start_date: str,
        end_date: str,
    ) -> ArchiveResponse:
        """
        Fetch the daily series for ``[start_date, end_date]``.

        Raises
        ------
        UpstreamUnavailable
            The request never produced an HTTP response.
        UpstreamError
            The API answered with a status other than 200.
        DecodeError
            The body is not JSON or does not match ``ArchiveResponse``.
        NoDataError
            The API returned an empty ``daily.time`` array.
        """
        params = self.build_params(latitude, longitude, start_date, end_date)
        logger.info(
            f"Fetching daily archive for lat={latitude}, lon={longitude} "
            f"from {start_date} to {end_date}"
        )
        try:
            resp = self._session.get(self._config.archive_url, params=params)
        except requests.exceptions.RequestException as exc:
            logger.error(f"Archive request failed before a response was received: {exc}")
            raise UpstreamUnavailable(f"Failed to reach Open-Meteo archive: {exc}") from exc

        if resp.status_code != 200:
            body = resp.text
            logger.error(
                "Open-Meteo archive returned status %d: %s",
                resp.status_code,
                body[:MAX_LOGGED_BODY],
            )
            raise UpstreamError(
                f"Open-Meteo archive returned status {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error(f"Archive response is not valid JSON: {exc}")
            raise DecodeError(f"Failed to decode archive response: {exc}") from exc

        try:
            archive = ArchiveResponse.model_validate(payload)
        except PydanticValidationError as exc:
            logger.error(f"Archive response does not match the expected shape: {exc}")
            raise DecodeError(f"Unexpected archive response shape: {exc}") from exc

        if not archive.daily.time:
            logger.warning(f"No daily observations for lat={latitude}, lon={longitude}")
            raise NoDataError(f"No daily data for lat={latitude}, lon={longitude}")

        logger.info(f"Received {len(archive.daily.time)} days of observations")
        return archive


def make_open_meteo_archive_client_from_env(
    session: Optional[requests.Session] = None,
) -> OpenMeteoArchiveClient:
    """Construct the archive client using environment overrides."""
    config = OpenMeteoArchiveClientConfig(
        archive_url=os.getenv("OPEN_METEO_ARCHIVE_URL", OPEN_METEO_ARCHIVE_URL),
        timeout_seconds=float(os.getenv("OPEN_METEO_TIMEOUT_SEC", DEFAULT_TIMEOUT)),
        user_agent=os.getenv("OPEN_METEO_USER_AGENT", DEFAULT_USER_AGENT),
    )
    return OpenMeteoArchiveClient(config=config, session=session)
