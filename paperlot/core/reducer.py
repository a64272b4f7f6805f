"""
Reducer: pure lot state transitions.

The reducer is the heart of both the live projection and time travel. It must be:
- Pure (no side effects, no I/O, input state never mutated)
- Deterministic (same input -> same output)
- Total (stale or unknown-entity events are absorbed as no-ops)
- Splittable: fold(fold(s, e[:k]), e[k:]) == fold(s, e)
"""

from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Optional, Type

from .errors import InvalidTransitionError
from .events import (
    EVENT_TYPES,
    CarEntered,
    CarExited,
    CarMoved,
    DomainEvent,
    SpotOccupied,
    SpotVacated,
)
from .state import CarState, LotState, SpotOccupancy

# Handler signature: (current_lot_state, event) -> new_lot_state
Handler = Callable[[LotState, Any], LotState]


class Reducer:
    """
    Registry of event handlers keyed by event class.

    Usage:
        reducer = Reducer()
        reducer.register(CarEntered, on_car_entered)
        new_state = reducer.apply(state, event)
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[Any], Handler] = {}

    def register(self, event_cls: Type[Any], handler: Handler) -> None:
        """
        Register event handler.

        Args:
            event_cls: Event class (one of EVENT_TYPES)
            handler: Pure function (current_state, event) -> new_state
        """
        self._handlers[event_cls] = handler

    def ensure_complete(self, kinds: Iterable[Type[Any]] = EVENT_TYPES) -> "Reducer":
        """
        Check every event kind has a handler.

        Raises:
            InvalidTransitionError: Listing the kinds that are missing
        """
        missing = [cls.__name__ for cls in kinds if cls not in self._handlers]
        if missing:
            raise InvalidTransitionError(f"No handler for event kinds: {', '.join(missing)}")
        return self

    def apply(self, state: LotState, event: DomainEvent) -> LotState:
        """
        Apply event to state using registered handler.

        Raises:
            InvalidTransitionError: If no handler registered for event kind
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise InvalidTransitionError(f"No handler for event type: {type(event).__name__}")
        return handler(state, event)


def on_car_entered(state: LotState, ev: CarEntered) -> LotState:
    cars = dict(state.cars)
    cars[ev.car_id] = CarState(car_id=ev.car_id, pos=ev.pos, updated_at=ev.occurred_at)
    return replace(state, time=ev.occurred_at, cars=cars)


def on_car_moved(state: LotState, ev: CarMoved) -> LotState:
    current = state.cars.get(ev.car_id)
    if current is None:
        # Unknown car: dropped, and time does not advance.
        return state
    cars = dict(state.cars)
    cars[ev.car_id] = replace(current, pos=ev.to_pos, updated_at=ev.occurred_at)
    return replace(state, time=ev.occurred_at, cars=cars)


def on_car_exited(state: LotState, ev: CarExited) -> LotState:
    cars = dict(state.cars)
    cars.pop(ev.car_id, None)
    return replace(state, time=ev.occurred_at, cars=cars)


def on_spot_occupied(state: LotState, ev: SpotOccupied) -> LotState:
    spots = dict(state.spots)
    spots[ev.spot_id] = SpotOccupancy(spot_id=ev.spot_id, car_id=ev.car_id, since=ev.occurred_at)
    return replace(state, time=ev.occurred_at, spots=spots)


def on_spot_vacated(state: LotState, ev: SpotVacated) -> LotState:
    spots = state.spots
    occupant = spots.get(ev.spot_id)
    # A stale vacate for a spot already reassigned must not evict the new occupant.
    if occupant is not None and occupant.car_id == ev.car_id:
        spots = dict(spots)
        del spots[ev.spot_id]
    return replace(state, time=ev.occurred_at, spots=spots)


def lot_reducer() -> Reducer:
    """Build the reducer for lot streams with every event kind registered."""
    r = Reducer()
    r.register(CarEntered, on_car_entered)
    r.register(CarMoved, on_car_moved)
    r.register(CarExited, on_car_exited)
    r.register(SpotOccupied, on_spot_occupied)
    r.register(SpotVacated, on_spot_vacated)
    return r.ensure_complete()


_DEFAULT_REDUCER = lot_reducer()


def fold(
    state: LotState, events: Iterable[DomainEvent], reducer: Optional[Reducer] = None
) -> LotState:
    """
    Fold an ordered event sequence onto a state.

    Args:
        state: Starting state (not mutated)
        events: Domain events in the order to apply them
        reducer: Reducer to use (defaults to the lot reducer)

    Returns:
        New LotState with all events applied
    """
    r = reducer or _DEFAULT_REDUCER
    for ev in events:
        state = r.apply(state, ev)
    return state
