from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from weather_history.models import ArchiveResponse, WeatherRecord


def test_archive_response_ignores_extra_fields(archive_payload):
    model = ArchiveResponse.model_validate(archive_payload(days=2))
    assert model.latitude == 40.7
    assert not hasattr(model, "generationtime_ms")
    assert model.daily.temperature_2m_mean == [2.0, 3.0]


def test_daily_series_accepts_null_observations():
    model = ArchiveResponse.model_validate(
        {
            "latitude": 1.0,
            "longitude": 2.0,
            "daily": {
                "time": ["2024-01-01"],
                "temperature_2m_min": [None],
                "temperature_2m_max": [None],
                "temperature_2m_mean": [None],
                "rain_sum": [None],
                "snowfall_sum": [None],
            },
        }
    )
    assert model.daily.rain_sum == [None]


def test_lengths_reports_every_array():
    model = ArchiveResponse.model_validate(
        {"latitude": 1.0, "longitude": 2.0, "daily": {"time": ["a", "b", "c"], "rain_sum": [0.0, 1.0]}}
    )
    lengths = model.daily.lengths()
    assert lengths["time"] == 3
    assert lengths["rain_sum"] == 2
    assert lengths["snowfall_sum"] == 0
    assert len(lengths) == 6


def test_weather_record_is_immutable_and_serialises():
    record = WeatherRecord(
        latitude=40.71,
        longitude=-74.01,
        date="2024-01-01",
        mean_temperature=1.5,
        min_temperature=-1.0,
        max_temperature=4.0,
        rain_sum=0.2,
        snowfall_sum=0.0,
        inserted_at=datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc),
    )

    with pytest.raises(ValidationError):
        record.rain_sum = 3.0

    row = record.to_row()
    assert row["date"] == "2024-01-01"
    assert row["inserted_at"].startswith("2024-06-15T12:00:00")
    assert record.row_key() == "40.7100:-74.0100:2024-01-01"
