"""
Domain event model for lot streams.

Events are immutable records of something that happened on a lot. The set of
kinds is closed: DomainEvent is a Union over the classes below and
EVENT_TYPES lists them, so the reducer and validators can check they cover
every kind.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union


@dataclass(frozen=True)
class XY:
    """2D lot coordinate."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


class _LotEvent:
    """Shared behaviour of every event kind."""

    TYPE: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        return event_to_dict(self)  # type: ignore[arg-type]


@dataclass(frozen=True)
class CarEntered(_LotEvent):
    TYPE: ClassVar[str] = "CarEntered"

    lot_id: str
    car_id: str
    pos: XY
    occurred_at: str


@dataclass(frozen=True)
class CarMoved(_LotEvent):
    """
    A car moved from one coordinate to another.

    duration_ms is an animation hint for consumers; the fold ignores it.
    """
    TYPE: ClassVar[str] = "CarMoved"

    lot_id: str
    car_id: str
    from_pos: XY
    to_pos: XY
    occurred_at: str
    duration_ms: Optional[float] = None


@dataclass(frozen=True)
class CarExited(_LotEvent):
    TYPE: ClassVar[str] = "CarExited"

    lot_id: str
    car_id: str
    occurred_at: str


@dataclass(frozen=True)
class SpotOccupied(_LotEvent):
    TYPE: ClassVar[str] = "SpotOccupied"

    lot_id: str
    car_id: str
    spot_id: str
    occurred_at: str


@dataclass(frozen=True)
class SpotVacated(_LotEvent):
    TYPE: ClassVar[str] = "SpotVacated"

    lot_id: str
    car_id: str
    spot_id: str
    occurred_at: str


DomainEvent = Union[CarEntered, CarMoved, CarExited, SpotOccupied, SpotVacated]

EVENT_TYPES: Tuple[Type[Any], ...] = (
    CarEntered,
    CarMoved,
    CarExited,
    SpotOccupied,
    SpotVacated,
)

EVENT_TYPES_BY_NAME: Dict[str, Type[Any]] = {cls.TYPE: cls for cls in EVENT_TYPES}


def event_type(event: DomainEvent) -> str:
    """Return the wire discriminator (e.g. "CarEntered") of an event."""
    return type(event).TYPE


@dataclass(frozen=True)
class StoredEvent:
    """
    Envelope assigned by the event log at append time.

    Fields:
        event_id: Globally unique id (uuid4)
        stream_id: Lot id the event belongs to
        occurred_at: Business time, canonical UTC text
        created_at: Ingestion wall-clock time, canonical UTC text
        event: The domain event (its occurred_at equals the envelope's)
    """
    event_id: str
    stream_id: str
    occurred_at: str
    created_at: str
    event: DomainEvent

    @property
    def type(self) -> str:
        return event_type(self.event)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "streamId": self.stream_id,
            "occurredAt": self.occurred_at,
            "createdAt": self.created_at,
            "event": event_to_dict(self.event),
        }


def event_to_dict(event: DomainEvent) -> Dict[str, Any]:
    """
    Convert an event to its wire dict: camelCase keys plus a "type" tag.

    durationMs is omitted when unset.
    """
    data: Dict[str, Any] = {"type": event_type(event), "lotId": event.lot_id, "carId": event.car_id}
    if isinstance(event, CarEntered):
        data["pos"] = event.pos.to_dict()
    elif isinstance(event, CarMoved):
        data["from"] = event.from_pos.to_dict()
        data["to"] = event.to_pos.to_dict()
        if event.duration_ms is not None:
            data["durationMs"] = event.duration_ms
    elif isinstance(event, (SpotOccupied, SpotVacated)):
        data["spotId"] = event.spot_id
    data["occurredAt"] = event.occurred_at
    return data
