"""
Event storage.

This module provides:
- EventStore: Abstract interface for lot event storage
- InMemoryEventStore: Volatile, per-stream time-ordered storage
- ReadWriteLock: Concurrent reads, exclusive writes
- read_events / load_into: JSONL fixture import
"""

from .store import EventStore
from .memory_store import InMemoryEventStore
from .locks import ReadWriteLock
from .jsonl import read_events, load_into

__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "ReadWriteLock",
    "read_events",
    "load_into",
]
