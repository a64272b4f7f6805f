"""
Tests for fold semantics and purity.

Critical: fold must be pure, total and split-invariant, and must preserve
the per-kind time-advance rules.
"""

import pytest

from paperlot.core.canonical import canonical_json_str
from paperlot.core.errors import InvalidTransitionError
from paperlot.core.events import EVENT_TYPES, CarEntered
from paperlot.core.reducer import Reducer, fold, lot_reducer, on_car_entered
from paperlot.core.state import LotState

from .helpers import LOT, entered, exited, moved, occupied, ts, vacated


def _sample_events():
    return [
        entered("A", 10, 10, 0),
        moved("A", (12, 14), 1),
        entered("B", 0, 0, 2),
        occupied("A", "S1", 3),
        moved("ghost", (1, 1), 4),
        vacated("B", "S1", 5),
        occupied("B", "S2", 6),
        exited("A", 7),
        vacated("A", "S1", 8),
        moved("B", (3, 3), 9),
    ]


def test_fold_split_invariance():
    """fold(fold(s, e[:k]), e[k:]) == fold(s, e) for every k."""
    events = _sample_events()
    s0 = LotState.empty(LOT)
    whole = fold(s0, events)

    for k in range(len(events) + 1):
        assert fold(fold(s0, events[:k]), events[k:]) == whole


def test_fold_deterministic_output():
    """Same (state, events) must produce identical output across runs."""
    events = _sample_events()

    results = {canonical_json_str(fold(LotState.empty(LOT), events)) for _ in range(50)}

    assert len(results) == 1


def test_fold_does_not_mutate_input():
    s0 = fold(LotState.empty(LOT), [entered("A", 1, 1, 0), occupied("A", "S1", 1)])
    cars_before = dict(s0.cars)
    spots_before = dict(s0.spots)

    fold(s0, [exited("A", 2), vacated("A", "S1", 3)])

    assert s0.cars == cars_before
    assert s0.spots == spots_before
    assert s0.time == ts(1)


def test_car_entered_upserts_and_advances_time():
    s = fold(LotState.empty(LOT), [entered("A", 1, 1, 0), entered("A", 5, 6, 1)])

    car = s.cars["A"]
    assert (car.pos.x, car.pos.y) == (5, 6)
    assert car.status == "IN"
    assert car.updated_at == ts(1)
    assert s.time == ts(1)


def test_car_moved_updates_known_car():
    s = fold(LotState.empty(LOT), [entered("A", 1, 1, 0), moved("A", (7, 8), 2)])

    assert (s.cars["A"].pos.x, s.cars["A"].pos.y) == (7, 8)
    assert s.cars["A"].updated_at == ts(2)
    assert s.time == ts(2)


def test_car_moved_unknown_car_is_noop_without_time_advance():
    s0 = fold(LotState.empty(LOT), [entered("A", 1, 1, 0)])

    s1 = fold(s0, [moved("ghost", (9, 9), 5)])

    assert s1 == s0
    assert "ghost" not in s1.cars
    assert s1.time == ts(0)


def test_car_exited_removes_and_advances_time_even_if_absent():
    s = fold(LotState.empty(LOT), [entered("A", 1, 1, 0), exited("A", 1), exited("nobody", 2)])

    assert s.cars == {}
    assert s.time == ts(2)


def test_spot_occupied_upserts_with_since():
    s = fold(LotState.empty(LOT), [occupied("A", "S1", 0), occupied("B", "S1", 3)])

    assert s.spots["S1"].car_id == "B"
    assert s.spots["S1"].since == ts(3)
    assert s.time == ts(3)


def test_spot_vacated_requires_matching_occupant():
    """A stale vacate from a different car leaves the occupant in place but advances time."""
    s0 = fold(LotState.empty(LOT), [occupied("A", "S1", 0)])

    stale = fold(s0, [vacated("B", "S1", 4)])
    assert stale.spots == s0.spots
    assert stale.time == ts(4)

    freed = fold(s0, [vacated("A", "S1", 5)])
    assert "S1" not in freed.spots
    assert freed.time == ts(5)


def test_spot_vacated_unknown_spot_advances_time():
    s = fold(LotState.empty(LOT), [vacated("A", "S9", 2)])

    assert s.spots == {}
    assert s.time == ts(2)


def test_lot_reducer_covers_every_kind():
    r = lot_reducer()

    assert r.ensure_complete(EVENT_TYPES) is r


def test_incomplete_reducer_is_rejected():
    r = Reducer()
    r.register(CarEntered, on_car_entered)

    with pytest.raises(InvalidTransitionError) as exc:
        r.ensure_complete()

    assert "CarMoved" in str(exc.value)


def test_reducer_unregistered_kind_raises():
    r = Reducer()

    with pytest.raises(InvalidTransitionError):
        r.apply(LotState.empty(LOT), entered("A", 0, 0, 0))
