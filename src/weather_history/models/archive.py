"""Pydantic schemas for the Open-Meteo archive API payload."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DAILY_VARIABLES = (
    "temperature_2m_min",
    "temperature_2m_max",
    "temperature_2m_mean",
    "rain_sum",
    "snowfall_sum",
)


class DailySeries(BaseModel):
    """Index-aligned daily arrays; one entry per calendar day."""

    model_config = ConfigDict(extra="ignore")

    time: List[str] = Field(default_factory=list)
    temperature_2m_min: List[Optional[float]] = Field(default_factory=list)
    temperature_2m_max: List[Optional[float]] = Field(default_factory=list)
    temperature_2m_mean: List[Optional[float]] = Field(default_factory=list)
    rain_sum: List[Optional[float]] = Field(default_factory=list)
    snowfall_sum: List[Optional[float]] = Field(default_factory=list)

    def lengths(self) -> Dict[str, int]:
        """Length of each array, keyed by the API's field name."""
        return {
            "time": len(self.time),
            **{name: len(getattr(self, name)) for name in DAILY_VARIABLES},
        }


class ArchiveResponse(BaseModel):
    """Top-level archive response; coordinates are the grid cell the API snapped to."""

    model_config = ConfigDict(extra="ignore")

    latitude: float
    longitude: float
    daily: DailySeries = Field(default_factory=DailySeries)
