"""
Read helpers over a LotState.

Derived figures such as dwell time are computed here from stored fields;
the reducer never maintains them.
"""

from typing import List, Optional

from .core.clock import ms_between
from .core.state import LotState, SpotOccupancy


def car_ids(state: LotState) -> List[str]:
    return sorted(state.cars.keys())


def occupied_spot_ids(state: LotState) -> List[str]:
    return sorted(state.spots.keys())


def spot_for_car(state: LotState, car_id: str) -> Optional[SpotOccupancy]:
    """
    Return the spot occupied by car_id, if any.

    If a car is recorded in several spots the earliest ``since`` wins.
    """
    held = [s for s in state.spots.values() if s.car_id == car_id]
    if not held:
        return None
    return min(held, key=lambda s: (s.since, s.spot_id))


def spot_dwell_ms(state: LotState, spot_id: str, now: Optional[str] = None) -> Optional[float]:
    """
    Milliseconds a spot has been continuously occupied.

    Args:
        state: Lot state
        spot_id: Spot to inspect
        now: Instant to measure to (defaults to state.time)

    Returns:
        Dwell in ms, or None if the spot is free or no instant is known
    """
    spot = state.spots.get(spot_id)
    if spot is None:
        return None
    until = now or state.time
    if until is None:
        return None
    return max(0.0, ms_between(spot.since, until))
