"""
Runtime settings read from the environment.

Environment Variables:
    PAPERLOT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR - default: INFO
    PAPERLOT_LOG_FORMAT: json, text - default: json
    PAPERLOT_METRICS_ENABLED: 1 to serve /metrics - default: 0
    PAPERLOT_METRICS_PORT: metrics HTTP port - default: 8080
    PAPERLOT_REPLAY_POLL_MS: longest replay sleep between abort checks - default: 50
    PAPERLOT_DEFAULT_LOT: lot id used when a caller names none - default: 001
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_format: str = "json"
    metrics_enabled: bool = False
    metrics_port: int = 8080
    replay_poll_ms: float = 50.0
    default_lot: str = "001"

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            log_level=os.getenv("PAPERLOT_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("PAPERLOT_LOG_FORMAT", "json").lower(),
            metrics_enabled=os.getenv("PAPERLOT_METRICS_ENABLED", "0") == "1",
            metrics_port=int(os.getenv("PAPERLOT_METRICS_PORT", "8080")),
            replay_poll_ms=float(os.getenv("PAPERLOT_REPLAY_POLL_MS", "50")),
            default_lot=os.getenv("PAPERLOT_DEFAULT_LOT", "001"),
        )
