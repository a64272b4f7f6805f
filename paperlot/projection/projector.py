"""
Live projection of lot streams.

The projector keeps one LotState per stream and folds each new event onto it
as it is appended, so current-state reads never touch the log.
"""

import logging
from typing import Dict, List, Optional

from ..core.events import DomainEvent
from ..core.reducer import Reducer, fold, lot_reducer
from ..core.state import LotState
from ..log.locks import ReadWriteLock
from ..log.store import EventStore

logger = logging.getLogger(__name__)


class Projector:
    """
    Incremental live-state cache: stream_id -> LotState.

    For any stream and events E applied in order, get(stream) equals
    fold(LotState.empty(stream), E).
    """

    def __init__(self, reducer: Optional[Reducer] = None) -> None:
        self.reducer = reducer or lot_reducer()
        self._lock = ReadWriteLock()
        self._current: Dict[str, LotState] = {}

    def apply(self, event: DomainEvent) -> LotState:
        """
        Fold one event onto its stream's state.

        Unseen streams start from an empty state.

        Returns:
            The stream's new state
        """
        with self._lock.write_locked():
            prev = self._current.get(event.lot_id) or LotState.empty(event.lot_id)
            nxt = self.reducer.apply(prev, event)
            self._current[event.lot_id] = nxt

        logger.debug("Projected %s onto %s (time=%s)", type(event).__name__, event.lot_id, nxt.time)
        return nxt

    def get(self, stream_id: str) -> LotState:
        """
        Current state of a stream.

        Returns a fresh empty state (not stored) for a stream never observed.
        """
        with self._lock.read_locked():
            state = self._current.get(stream_id)
        return state if state is not None else LotState.empty(stream_id)

    def rebuild(self, store: EventStore, stream_id: str) -> LotState:
        """
        Re-derive a stream's live state from the log.

        Used after importing events straight into the store, which bypasses
        apply().
        """
        events = [s.event for s in store.query_by_time(stream_id)]
        state = fold(LotState.empty(stream_id), events, self.reducer)
        with self._lock.write_locked():
            self._current[stream_id] = state

        logger.info("Rebuilt projection for %s from %d events", stream_id, len(events))
        return state

    def streams(self) -> List[str]:
        with self._lock.read_locked():
            return sorted(self._current.keys())
