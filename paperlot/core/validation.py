"""
Required-field validation per event kind.

validate_event() is the single gate in front of the event log: it either
returns a normalized copy of the event or raises ValidationError.
"""

import dataclasses
import math
from typing import Any, Dict, Tuple, Type

from .clock import must_iso
from .errors import ValidationError
from .events import (
    XY,
    CarEntered,
    CarExited,
    CarMoved,
    DomainEvent,
    SpotOccupied,
    SpotVacated,
)

REQUIRED_FIELDS: Dict[Type[Any], Tuple[str, ...]] = {
    CarEntered: ("lot_id", "car_id", "pos", "occurred_at"),
    CarMoved: ("lot_id", "car_id", "from_pos", "to_pos", "occurred_at"),
    CarExited: ("lot_id", "car_id", "occurred_at"),
    SpotOccupied: ("lot_id", "car_id", "spot_id", "occurred_at"),
    SpotVacated: ("lot_id", "car_id", "spot_id", "occurred_at"),
}

# Messages use wire names so callers can map them back to request fields.
WIRE_NAMES: Dict[str, str] = {
    "lot_id": "lotId",
    "car_id": "carId",
    "spot_id": "spotId",
    "pos": "pos",
    "from_pos": "from",
    "to_pos": "to",
    "occurred_at": "occurredAt",
    "duration_ms": "durationMs",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _check_id(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{WIRE_NAMES[name]} required", field=WIRE_NAMES[name])


def _check_xy(name: str, value: Any) -> None:
    if not isinstance(value, XY) or not (_is_number(value.x) and _is_number(value.y)):
        raise ValidationError(
            f"{WIRE_NAMES[name]} must be a point with numeric x and y", field=WIRE_NAMES[name]
        )


def validate_event(event: DomainEvent) -> DomainEvent:
    """
    Validate required fields and normalize occurred_at.

    Args:
        event: Domain event of any kind

    Returns:
        Copy of the event with occurred_at in canonical UTC form

    Raises:
        ValidationError: Unknown kind, missing/malformed field, bad timestamp
    """
    required = REQUIRED_FIELDS.get(type(event))
    if required is None:
        raise ValidationError(f"Unknown event kind: {type(event).__name__}", field="type")

    for name in required:
        value = getattr(event, name, None)
        if name == "occurred_at":
            continue
        if name in ("pos", "from_pos", "to_pos"):
            _check_xy(name, value)
        else:
            _check_id(name, value)

    if isinstance(event, CarMoved) and event.duration_ms is not None:
        if not _is_number(event.duration_ms) or event.duration_ms < 0:
            raise ValidationError("durationMs must be a non-negative number", field="durationMs")

    occurred_at = must_iso(event.occurred_at, field="occurredAt")
    if occurred_at == event.occurred_at:
        return event
    return dataclasses.replace(event, occurred_at=occurred_at)
