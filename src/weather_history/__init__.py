"""Load 20 years of Open-Meteo daily weather history into BigQuery."""

__version__ = "0.1.0"
