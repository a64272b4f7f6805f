"""
Wire-dict decoding for domain events.

The inverse of event_to_dict(): turns ``{"type": "CarEntered", "lotId": ...}``
into a validated DomainEvent.
"""

from typing import Any, Dict, Optional

from .errors import ValidationError
from .events import (
    EVENT_TYPES_BY_NAME,
    XY,
    CarEntered,
    CarExited,
    CarMoved,
    DomainEvent,
    SpotOccupied,
    SpotVacated,
)
from .validation import validate_event


def _xy(data: Dict[str, Any], key: str) -> Optional[XY]:
    raw = data.get(key)
    if isinstance(raw, XY):
        return raw
    if isinstance(raw, dict) and "x" in raw and "y" in raw:
        return XY(x=raw["x"], y=raw["y"])
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return XY(x=raw[0], y=raw[1])
    if raw is None:
        return None
    raise ValidationError(f"{key} must be an object with x and y", field=key)


def event_from_dict(data: Dict[str, Any], default_occurred_at: Optional[str] = None) -> DomainEvent:
    """
    Decode and validate a wire dict.

    Args:
        data: Dict with a "type" discriminator and camelCase fields
        default_occurred_at: Used when the dict has no occurredAt

    Raises:
        ValidationError: Unknown type, missing or malformed fields
    """
    if not isinstance(data, dict):
        raise ValidationError("event must be an object", field=None)

    type_name = data.get("type")
    kind = EVENT_TYPES_BY_NAME.get(type_name) if isinstance(type_name, str) else None
    if kind is None:
        raise ValidationError(f"Unknown event type: {type_name!r}", field="type")

    lot_id = data.get("lotId")
    car_id = data.get("carId")
    occurred_at = data.get("occurredAt")
    if occurred_at is None:
        occurred_at = default_occurred_at

    event: DomainEvent
    if kind is CarEntered:
        event = CarEntered(lot_id=lot_id, car_id=car_id, pos=_xy(data, "pos"), occurred_at=occurred_at)
    elif kind is CarMoved:
        event = CarMoved(
            lot_id=lot_id,
            car_id=car_id,
            from_pos=_xy(data, "from"),
            to_pos=_xy(data, "to"),
            occurred_at=occurred_at,
            duration_ms=data.get("durationMs"),
        )
    elif kind is CarExited:
        event = CarExited(lot_id=lot_id, car_id=car_id, occurred_at=occurred_at)
    elif kind is SpotOccupied:
        event = SpotOccupied(
            lot_id=lot_id, car_id=car_id, spot_id=data.get("spotId"), occurred_at=occurred_at
        )
    else:
        event = SpotVacated(
            lot_id=lot_id, car_id=car_id, spot_id=data.get("spotId"), occurred_at=occurred_at
        )
    return validate_event(event)
