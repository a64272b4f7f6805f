"""
Replay: rebuilding and re-delivering history.

- state_at: time-travel reconstruction of a lot as of an instant
- ReplayScheduler: paced, speed-scaled delivery of an event slice
"""

from .runner import ReplayResult, state_at
from .scheduler import (
    CancelToken,
    ReplayOutcome,
    ReplayScheduler,
    replay_events_as_stream,
)

__all__ = [
    "ReplayResult",
    "state_at",
    "CancelToken",
    "ReplayOutcome",
    "ReplayScheduler",
    "replay_events_as_stream",
]
