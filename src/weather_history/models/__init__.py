"""Model package for weather_history."""
from .archive import DAILY_VARIABLES, ArchiveResponse, DailySeries
from .records import WeatherRecord

__all__ = [
    "DAILY_VARIABLES",
    "ArchiveResponse",
    "DailySeries",
    "WeatherRecord",
]
