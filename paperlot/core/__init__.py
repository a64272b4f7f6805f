"""
Core event-sourcing primitives for lot streams.

This module provides:
- Events: closed set of immutable domain events plus the StoredEvent envelope
- State: LotState materialized view
- Reducer: pure fold of events onto state
- Validation / codec: required-field checks and wire-dict decoding
- Clock: timestamp parsing, normalization and injectable time sources
- Canonical: deterministic serialization for hashing and comparison
"""

from .events import (
    XY,
    CarEntered,
    CarMoved,
    CarExited,
    SpotOccupied,
    SpotVacated,
    DomainEvent,
    StoredEvent,
    EVENT_TYPES,
    event_type,
    event_to_dict,
)
from .state import CarState, SpotOccupancy, LotState
from .reducer import Reducer, fold, lot_reducer
from .validation import validate_event
from .codec import event_from_dict
from .clock import SystemClock, ManualClock, iso_now, must_iso, ms_between, parse_iso
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str, state_hash
from .ids import new_event_id
from .errors import ValidationError, InvalidTransitionError, EventStoreError

__all__ = [
    "XY",
    "CarEntered",
    "CarMoved",
    "CarExited",
    "SpotOccupied",
    "SpotVacated",
    "DomainEvent",
    "StoredEvent",
    "EVENT_TYPES",
    "event_type",
    "event_to_dict",
    "CarState",
    "SpotOccupancy",
    "LotState",
    "Reducer",
    "fold",
    "lot_reducer",
    "validate_event",
    "event_from_dict",
    "SystemClock",
    "ManualClock",
    "iso_now",
    "must_iso",
    "ms_between",
    "parse_iso",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "state_hash",
    "new_event_id",
    "ValidationError",
    "InvalidTransitionError",
    "EventStoreError",
]
