"""Logging setup shared by the function entry point, clients and sinks."""
from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(job_name)s:%(tag)s] %(name)s - %(message)s"


class _ContextFilter(logging.Filter):
    """Guarantee ``tag`` and ``job_name`` exist so the formatter never fails."""

    def __init__(self, job_name: str) -> None:
        super().__init__()
        self.job_name = job_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "tag"):
            record.tag = "-"
        if not hasattr(record, "job_name"):
            record.job_name = self.job_name
        return True


class _TaggedAdapter(logging.LoggerAdapter):
    """Attach a fixed tag to every record while keeping caller-supplied extras."""

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("tag", self.extra["tag"])
        kwargs["extra"] = extra
        return msg, kwargs


def build_logging_config(level: str = "INFO", job_name: str = "weather_history") -> Dict[str, Any]:
    """Return a ``dictConfig`` mapping that logs everything to stdout."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "context": {
                "()": _ContextFilter,
                "job_name": job_name,
            },
        },
        "formatters": {
            "default": {"format": DEFAULT_FORMAT},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "default",
                "filters": ["context"],
            },
        },
        "loggers": {
            # urllib3 logs every connection at DEBUG; keep it quiet.
            "urllib3": {"level": "WARNING"},
        },
        "root": {
            "level": level.upper(),
            "handlers": ["stdout"],
        },
    }


def setup_logging(level: str = "INFO", job_name: str = "weather_history") -> None:
    """Configure the root logger."""
    logging.config.dictConfig(build_logging_config(level=level, job_name=job_name))


def get_tagged_logger(name: str, tag: str) -> logging.LoggerAdapter:
    """Return a logger whose records carry ``tag`` for filtering in log sinks."""
    return _TaggedAdapter(logging.getLogger(name), {"tag": tag})
