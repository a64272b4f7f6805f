"""
Time travel: reconstruct a lot's state as of an instant.

Replay is pure: folds the stream's events up to the bound onto an empty state.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.clock import must_iso
from ..core.reducer import Reducer, fold
from ..core.state import LotState
from ..log.store import EventStore


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of a time-travel reconstruction.

    Fields:
        state: State after applying events
        applied: Number of events folded
    """
    state: LotState
    applied: int


def state_at(
    store: EventStore,
    stream_id: str,
    at: Optional[str] = None,
    reducer: Optional[Reducer] = None,
) -> ReplayResult:
    """
    Reconstruct a stream's state as of ``at``.

    Same log and same instant always produce the same state.

    Args:
        store: Event store to read from
        stream_id: Lot id
        at: Inclusive upper bound (None = whole stream)
        reducer: Reducer to use (defaults to the lot reducer)

    Returns:
        ReplayResult with the reconstructed state and count. The starting
        state's time is ``at``, so a stream with no events up to ``at``
        reports that instant.

    Raises:
        ValidationError: If ``at`` is not a valid timestamp
    """
    bound = must_iso(at, field="at") if at is not None else None
    events = [s.event for s in store.query_by_time(stream_id, None, bound)]
    st = fold(LotState.empty(stream_id, bound), events, reducer)
    return ReplayResult(state=st, applied=len(events))
