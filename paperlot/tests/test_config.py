"""
Tests for environment settings and logging setup.
"""

import json
import logging

from paperlot.config import Settings
from paperlot.logging_config import LotIDFilter, get_logger, setup_logging


def test_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_FORMAT", "METRICS_ENABLED", "METRICS_PORT", "REPLAY_POLL_MS", "DEFAULT_LOT"):
        monkeypatch.delenv(f"PAPERLOT_{name}", raising=False)

    assert Settings.from_env() == Settings()


def test_from_env(monkeypatch):
    monkeypatch.setenv("PAPERLOT_LOG_LEVEL", "debug")
    monkeypatch.setenv("PAPERLOT_LOG_FORMAT", "TEXT")
    monkeypatch.setenv("PAPERLOT_METRICS_ENABLED", "1")
    monkeypatch.setenv("PAPERLOT_METRICS_PORT", "9100")
    monkeypatch.setenv("PAPERLOT_REPLAY_POLL_MS", "10")
    monkeypatch.setenv("PAPERLOT_DEFAULT_LOT", "B7")

    s = Settings.from_env()

    assert s.log_level == "DEBUG"
    assert s.log_format == "text"
    assert s.metrics_enabled is True
    assert s.metrics_port == 9100
    assert s.replay_poll_ms == 10.0
    assert s.default_lot == "B7"


def test_lot_id_filter_fills_missing():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

    assert LotIDFilter().filter(record)
    assert record.lot_id == "N/A"


def test_json_log_line_carries_lot_id(capsys):
    setup_logging(Settings(log_level="INFO", log_format="json"))
    try:
        get_logger("paperlot.test", lot_id="001").info("hello")
        line = capsys.readouterr().err.strip().splitlines()[-1]
    finally:
        logging.getLogger().handlers.clear()

    body = json.loads(line)
    assert body["message"] == "hello"
    assert body["lot_id"] == "001"
    assert body["level"] == "INFO"
