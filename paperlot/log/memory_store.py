"""
In-memory event store.

Volatile: the log lives as long as the process. Each stream keeps its events
sorted by occurredAt with a parallel key list so appends use bisect insertion
instead of a full re-sort.
"""

import bisect
import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..core.clock import SystemClock, parse_iso
from ..core.errors import EventStoreError, ValidationError
from ..core.events import DomainEvent, StoredEvent
from ..core.ids import new_event_id
from ..core.validation import validate_event
from ..metrics import track_event_appended, track_validation_failure
from .locks import ReadWriteLock
from .store import EventStore

logger = logging.getLogger(__name__)

# (occurredAt, ingestion sequence): the sequence breaks occurredAt ties in append order.
_SortKey = Tuple[datetime, int]

_MAX_SEQ = float("inf")


class InMemoryEventStore(EventStore):
    """
    Process-local append-only event store.

    Guarantees:
    - Append-only (no mutations, no deletes)
    - Per-stream ascending occurredAt order, stable for ties
    - Appends serialized against each other and against reads;
      reads run concurrently with other reads
    """

    def __init__(self, clock=None, id_factory: Callable[[], str] = new_event_id) -> None:
        """
        Initialize store.

        Args:
            clock: Object with now() -> ISO text used for createdAt
                (defaults to wall-clock time)
            id_factory: Event id generator
        """
        self.clock = clock or SystemClock()
        self.id_factory = id_factory
        self._lock = ReadWriteLock()
        self._events: Dict[str, List[StoredEvent]] = {}
        self._keys: Dict[str, List[_SortKey]] = {}
        self._ids: Dict[str, StoredEvent] = {}
        self._seq = 0

    def _prepare(self, stream_id: str, event: DomainEvent) -> Tuple[DomainEvent, datetime]:
        try:
            normalized = validate_event(event)
            if not isinstance(stream_id, str) or not stream_id:
                raise ValidationError("streamId required", field="streamId")
            if normalized.lot_id != stream_id:
                raise ValidationError(
                    f"lotId {normalized.lot_id!r} does not match stream {stream_id!r}",
                    field="lotId",
                )
        except ValidationError as e:
            kind = getattr(type(event), "TYPE", type(event).__name__)
            track_validation_failure(kind)
            logger.warning("Rejected %s for stream %s: %s", kind, stream_id, e)
            raise
        return normalized, parse_iso(normalized.occurred_at)

    def _new_ids(self, n: int) -> List[str]:
        """Draw n ids, all unused, before anything is written."""
        ids = [self.id_factory() for _ in range(n)]
        seen = set()
        for event_id in ids:
            if event_id in self._ids or event_id in seen:
                raise EventStoreError(f"Duplicate event id: {event_id}")
            seen.add(event_id)
        return ids

    def _insert(self, stream_id: str, event: DomainEvent, at: datetime, event_id: str) -> StoredEvent:
        stored = StoredEvent(
            event_id=event_id,
            stream_id=stream_id,
            occurred_at=event.occurred_at,
            created_at=self.clock.now(),
            event=event,
        )
        key = (at, self._seq)
        self._seq += 1

        keys = self._keys.setdefault(stream_id, [])
        events = self._events.setdefault(stream_id, [])
        idx = bisect.bisect_right(keys, key)
        keys.insert(idx, key)
        events.insert(idx, stored)
        self._ids[event_id] = stored
        return stored

    def append(self, stream_id: str, event: DomainEvent) -> StoredEvent:
        normalized, at = self._prepare(stream_id, event)
        with self._lock.write_locked():
            (event_id,) = self._new_ids(1)
            stored = self._insert(stream_id, normalized, at, event_id)

        track_event_appended(stored.type)
        logger.debug(
            "Appended %s %s to %s at %s", stored.type, stored.event_id, stream_id, stored.occurred_at
        )
        return stored

    def extend(self, events: Iterable[DomainEvent]) -> List[StoredEvent]:
        """
        Append a batch atomically.

        Every event is validated and every id drawn before any is written, so a
        ValidationError or EventStoreError leaves the store unchanged.
        """
        prepared = [self._prepare(getattr(ev, "lot_id", None), ev) for ev in events]
        with self._lock.write_locked():
            ids = self._new_ids(len(prepared))
            stored = [
                self._insert(ev.lot_id, ev, at, event_id)
                for (ev, at), event_id in zip(prepared, ids)
            ]

        for s in stored:
            track_event_appended(s.type)
        logger.debug("Appended batch of %d events", len(stored))
        return stored

    def query_by_time(
        self, stream_id: str, from_: Optional[str] = None, to: Optional[str] = None
    ) -> List[StoredEvent]:
        lower = parse_iso(from_, field="from") if from_ is not None else None
        upper = parse_iso(to, field="to") if to is not None else None

        with self._lock.read_locked():
            keys = self._keys.get(stream_id)
            if not keys:
                return []
            start = 0 if lower is None else bisect.bisect_left(keys, (lower, -1))
            end = len(keys) if upper is None else bisect.bisect_right(keys, (upper, _MAX_SEQ))
            return list(self._events[stream_id][start:end])

    def get(self, event_id: str) -> Optional[StoredEvent]:
        with self._lock.read_locked():
            return self._ids.get(event_id)

    def streams(self) -> List[str]:
        with self._lock.read_locked():
            return sorted(self._events.keys())

    def count(self, stream_id: Optional[str] = None) -> int:
        with self._lock.read_locked():
            if stream_id is None:
                return len(self._ids)
            return len(self._events.get(stream_id, ()))
