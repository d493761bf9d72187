"""Row model written to the BigQuery weather table."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class WeatherRecord(BaseModel):
    """One flattened day of weather for a location."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    latitude: float
    longitude: float
    date: str
    mean_temperature: Optional[float] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    rain_sum: Optional[float] = None
    snowfall_sum: Optional[float] = None
    inserted_at: datetime

    def to_row(self) -> Dict[str, Any]:
        """JSON-ready mapping for ``insert_rows_json``; timestamps become ISO strings."""
        return self.model_dump(mode="json")

    def row_key(self) -> str:
        """Stable per-location, per-day key used as the BigQuery insertId."""
        return f"{self.latitude:.4f}:{self.longitude:.4f}:{self.date}"
