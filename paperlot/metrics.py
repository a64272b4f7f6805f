"""
Prometheus metrics for the lot kernel.

Exposes operational metrics via HTTP /metrics endpoint for Prometheus scraping.

Environment Variables:
    PAPERLOT_METRICS_ENABLED: Enable metrics server (1/0) - default: 0
    PAPERLOT_METRICS_PORT: HTTP port for /metrics endpoint - default: 8080

Usage:
    from paperlot.metrics import start_metrics_server, track_event_appended

    start_metrics_server(enabled=True, port=8080)
    track_event_appended("CarEntered")

Tracking helpers are no-ops until init_metrics() has run, so library users
who never enable metrics pay nothing.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

# Metrics registry (module-level, thread-safe)
EVENTS_APPENDED: Optional[Counter] = None
VALIDATION_FAILURES: Optional[Counter] = None
REPLAY_EVENTS_DELIVERED: Optional[Counter] = None
REPLAY_SESSIONS_ACTIVE: Optional[Gauge] = None
REPLAY_DURATION: Optional[Histogram] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock; repeated calls are ignored.
    """
    global EVENTS_APPENDED, VALIDATION_FAILURES
    global REPLAY_EVENTS_DELIVERED, REPLAY_SESSIONS_ACTIVE, REPLAY_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        EVENTS_APPENDED = Counter(
            "paperlot_events_appended_total",
            "Total number of events appended to the event log",
            labelnames=["event_type"],
        )

        VALIDATION_FAILURES = Counter(
            "paperlot_validation_failures_total",
            "Total number of appends rejected by validation",
            labelnames=["event_type"],
        )

        REPLAY_EVENTS_DELIVERED = Counter(
            "paperlot_replay_events_delivered_total",
            "Total number of events delivered by replay schedulers",
        )

        REPLAY_SESSIONS_ACTIVE = Gauge(
            "paperlot_replay_sessions_active",
            "Number of replay schedulers currently running",
        )

        # Paced replays follow recorded time, so buckets reach into minutes.
        REPLAY_DURATION = Histogram(
            "paperlot_replay_duration_seconds",
            "Wall-clock duration of paced replays in seconds",
            buckets=(0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0, 900.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server (from PAPERLOT_METRICS_ENABLED)
        port: HTTP port for /metrics endpoint (from PAPERLOT_METRICS_PORT)
    """
    if not enabled:
        logger.info("Metrics server disabled (PAPERLOT_METRICS_ENABLED=0)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info("Metrics server started on http://0.0.0.0:%d/metrics", port)
    except OSError as e:
        logger.error("Failed to start metrics server: %s", e)


def track_event_appended(event_type: str) -> None:
    if EVENTS_APPENDED is not None:
        EVENTS_APPENDED.labels(event_type=event_type).inc()


def track_validation_failure(event_type: str) -> None:
    if VALIDATION_FAILURES is not None:
        VALIDATION_FAILURES.labels(event_type=event_type).inc()


def track_replay_delivered() -> None:
    if REPLAY_EVENTS_DELIVERED is not None:
        REPLAY_EVENTS_DELIVERED.inc()


@contextmanager
def track_replay_session() -> Generator[None, None, None]:
    """
    Context manager covering one paced replay.

    Keeps the active-sessions gauge and the duration histogram current.
    """
    if REPLAY_SESSIONS_ACTIVE is None or REPLAY_DURATION is None:
        yield
        return

    REPLAY_SESSIONS_ACTIVE.inc()
    try:
        with REPLAY_DURATION.time():
            yield
    finally:
        REPLAY_SESSIONS_ACTIVE.dec()
