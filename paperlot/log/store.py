"""
EventStore abstract interface.

Defines contract for lot event storage implementations.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..core.events import DomainEvent, StoredEvent


class EventStore(ABC):
    """
    Abstract event storage interface.

    All implementations must guarantee:
    - Append-only (no updates, no deletes)
    - Globally unique event ids
    - Per-stream order ascending by occurredAt, ties in insertion order,
      whatever order events were appended in
    - Atomic rejection: a ValidationError leaves the store unchanged
    """

    @abstractmethod
    def append(self, stream_id: str, event: DomainEvent) -> StoredEvent:
        """
        Append event to a stream.

        Args:
            stream_id: Lot id (must equal event.lot_id)
            event: Domain event to store

        Returns:
            StoredEvent envelope with event id and createdAt assigned

        Raises:
            ValidationError: Missing/malformed fields or unparseable occurredAt
        """
        ...

    @abstractmethod
    def query_by_time(
        self, stream_id: str, from_: Optional[str] = None, to: Optional[str] = None
    ) -> List[StoredEvent]:
        """
        Read a stream's events within [from_, to].

        Args:
            stream_id: Lot id
            from_: Inclusive lower bound (None = open)
            to: Inclusive upper bound (None = open)

        Returns:
            Events ascending by occurredAt

        Raises:
            ValidationError: If a bound is not a valid timestamp
        """
        ...

    @abstractmethod
    def streams(self) -> List[str]:
        """Return known stream ids, sorted."""
        ...

    @abstractmethod
    def count(self, stream_id: Optional[str] = None) -> int:
        """Number of stored events (in one stream, or overall)."""
        ...

    def extend(self, events: Iterable[DomainEvent]) -> List[StoredEvent]:
        """
        Append several events, each to the stream named by its lot_id.

        Default implementation appends one at a time; implementations may
        override to make the batch atomic.
        """
        return [self.append(ev.lot_id, ev) for ev in events]
