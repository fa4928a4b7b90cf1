"""Logging configuration for the Windspire backend."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable

ROOT_LOGGER = "windspire"

# Third-party loggers that log every outbound request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "groq", "google.auth", "urllib3")

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra_data`` fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = getattr(record, "extra_data", None)
        if isinstance(extra, dict):
            log_data.update(extra)

        # Datetimes and enums in extra_data are rendered with str()
        return json.dumps(log_data, default=str)


def _quiet(names: Iterable[str], level: int) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def configure_logging(debug: bool = False, log_format: str = "json") -> logging.Logger:
    """
    Configure the ``windspire`` logger tree.

    Args:
        debug: Log at DEBUG instead of INFO.
        log_format: ``json`` for structured output, ``text`` for a readable
            single-line format during local development.

    Returns:
        The application root logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.propagate = False

    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if log_format == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    _quiet(NOISY_LOGGERS, logging.INFO if debug else logging.WARNING)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger under the ``windspire`` namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
