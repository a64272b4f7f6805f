"""
Structured logging configuration.

Provides JSON-formatted logs with a lot_id field for correlating log lines
of one stream across appends, projections and replays.

Usage:
    from paperlot.logging_config import setup_logging, get_logger

    setup_logging(Settings.from_env())
    logger = get_logger(__name__, lot_id="001")
    logger.info("Replay requested")
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import Settings

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class LotIDFilter(logging.Filter):
    """
    Logging filter that adds lot_id to all log records.

    Ensures all logs have a lot_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "lot_id"):
            record.lot_id = "N/A"  # type: ignore
        return True


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logger.

    Uses settings.log_level and settings.log_format (json or text).
    """
    settings = settings or Settings.from_env()
    level = _LEVELS.get(settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(LotIDFilter())

    if settings.log_format == "json":
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(lot_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [lot_id=%(lot_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str, lot_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger carrying lot_id for correlation.

    Example:
        logger = get_logger(__name__, lot_id="001")
        logger.info("Replay started")
        # {"timestamp": "...", "level": "INFO", "message": "Replay started", "lot_id": "001"}
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"lot_id": lot_id or "N/A"})
