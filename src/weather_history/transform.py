"""Flatten the archive's parallel daily arrays into per-day rows."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Optional

from weather_history.errors import MalformedUpstreamData
from weather_history.models.archive import ArchiveResponse
from weather_history.models.records import WeatherRecord
from weather_history.utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="transform")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_weather_records(
    response: ArchiveResponse,
    *,
    clock: Optional[Callable[[], datetime]] = None,
) -> List[WeatherRecord]:
    """
    Pair the i-th entry of every daily array into one ``WeatherRecord``.

    Values pass through untouched. ``inserted_at`` is read from ``clock``
    once per record. Arrays of differing length raise
    ``MalformedUpstreamData`` instead of being truncated.
    """
    clock = clock or _utcnow
    daily = response.daily
    lengths = daily.lengths()
    if len(set(lengths.values())) > 1:
        logger.error(f"Refusing to pair misaligned daily arrays: {lengths}")
        raise MalformedUpstreamData(lengths)

    records: List[WeatherRecord] = []
    for idx, day in enumerate(daily.time):
        records.append(
            WeatherRecord(
                latitude=response.latitude,
                longitude=response.longitude,
                date=day,
                mean_temperature=daily.temperature_2m_mean[idx],
                min_temperature=daily.temperature_2m_min[idx],
                max_temperature=daily.temperature_2m_max[idx],
                rain_sum=daily.rain_sum[idx],
                snowfall_sum=daily.snowfall_sum[idx],
                inserted_at=clock(),
            )
        )

    logger.info(f"Built {len(records)} weather records")
    return records
