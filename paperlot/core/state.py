"""
Materialized lot state.

LotState is the per-stream view produced by folding events. It is treated as
immutable: the reducer builds a new LotState for every event it applies.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .events import XY

CAR_STATUS_IN = "IN"


@dataclass(frozen=True)
class CarState:
    car_id: str
    pos: XY
    updated_at: str
    status: str = CAR_STATUS_IN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "carId": self.car_id,
            "pos": self.pos.to_dict(),
            "status": self.status,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class SpotOccupancy:
    """Current occupant of a spot; since is the SpotOccupied occurredAt."""
    spot_id: str
    car_id: str
    since: str

    def to_dict(self) -> Dict[str, Any]:
        return {"spotId": self.spot_id, "carId": self.car_id, "since": self.since}


@dataclass(frozen=True)
class LotState:
    """
    Per-stream materialized view.

    Fields:
        lot_id: Stream id
        time: occurredAt of the last event that advanced the state, the query
            instant for a time-travel state, or None for a fresh empty state
        cars: car_id -> CarState for cars currently inside the lot
        spots: spot_id -> SpotOccupancy for occupied spots
    """
    lot_id: str
    time: Optional[str] = None
    cars: Dict[str, CarState] = field(default_factory=dict)
    spots: Dict[str, SpotOccupancy] = field(default_factory=dict)

    @staticmethod
    def empty(lot_id: str, time: Optional[str] = None) -> "LotState":
        return LotState(lot_id=lot_id, time=time)

    def is_empty(self) -> bool:
        return not self.cars and not self.spots

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lotId": self.lot_id,
            "time": self.time,
            "cars": {car_id: car.to_dict() for car_id, car in self.cars.items()},
            "spots": {spot_id: spot.to_dict() for spot_id, spot in self.spots.items()},
        }
