"""
Tests for paced replay.

Critical: pacing follows recorded gaps scaled by speed, and cancellation
stops delivery promptly without raising.
"""

import asyncio

import pytest

from paperlot.core.errors import ValidationError
from paperlot.replay.scheduler import CancelToken, ReplayScheduler, replay_events_as_stream

from .helpers import LOT, entered


class VirtualSleep:
    """Sleep stand-in that advances a virtual clock instead of waiting."""

    def __init__(self):
        self.now = 0.0
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


def _stored(store, offsets_ms):
    for i, ms in enumerate(offsets_ms):
        store.append(LOT, entered(f"C{i}", 0, 0, ms / 1000.0))
    return store.query_by_time(LOT)


@pytest.mark.asyncio
async def test_empty_sequence_completes_immediately():
    delivered = []
    sleep = VirtualSleep()

    outcome = await ReplayScheduler(speed=1, sleep=sleep).run([], delivered.append)

    assert outcome.delivered == 0
    assert outcome.total == 0
    assert not outcome.aborted
    assert delivered == []
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_pacing_scaled_by_speed(store):
    """Offsets 0, 1000, 3000 ms at speed 2 deliver at 0, 500, 1500 ms."""
    events = _stored(store, [0, 1000, 3000])
    sleep = VirtualSleep()
    delivered_at = []

    outcome = await ReplayScheduler(speed=2, poll_interval_ms=50, sleep=sleep).run(
        events, lambda ev: delivered_at.append(sleep.now)
    )

    assert outcome.completed
    assert delivered_at == pytest.approx([0.0, 0.5, 1.5])
    # Long waits are split into poll-sized slices.
    assert max(sleep.calls) <= 0.05 + 1e-9


@pytest.mark.asyncio
async def test_equal_timestamps_do_not_sleep(store):
    events = _stored(store, [0, 0, 0])
    sleep = VirtualSleep()
    delivered = []

    outcome = await ReplayScheduler(speed=1, sleep=sleep).run(events, delivered.append)

    assert outcome.delivered == 3
    assert [ev.event_id for ev in delivered] == [ev.event_id for ev in events]
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_real_time_pacing(store):
    """Wall-clock delivery is no earlier than the scaled offsets."""
    events = _stored(store, [0, 100, 300])
    loop = asyncio.get_running_loop()
    start = loop.time()
    offsets = []

    await replay_events_as_stream(events, 2, lambda ev: offsets.append(loop.time() - start))

    expected = [0.0, 0.05, 0.15]
    for got, want in zip(offsets, expected):
        assert got >= want - 0.005
        assert got < want + 0.25


@pytest.mark.asyncio
async def test_abort_between_deliveries_stops_cleanly(store):
    events = _stored(store, [0, 100, 200, 300])
    token = CancelToken()
    delivered = []

    def on_event(ev):
        delivered.append(ev)
        if len(delivered) == 2:
            token.cancel()

    outcome = await ReplayScheduler(speed=1, sleep=VirtualSleep()).run(events, on_event, token)

    assert len(delivered) == 2
    assert outcome.aborted
    assert outcome.delivered == 2
    assert outcome.total == 4


@pytest.mark.asyncio
async def test_abort_before_first_delivery(store):
    events = _stored(store, [0, 100])
    token = CancelToken()
    token.cancel()
    delivered = []

    outcome = await ReplayScheduler(speed=1).run(events, delivered.append, token)

    assert delivered == []
    assert outcome.aborted


@pytest.mark.asyncio
async def test_cancel_latency_bounded_by_poll_interval(store):
    """A cancel during a long gap ends the replay within a few poll intervals."""
    events = _stored(store, [0, 60_000])
    token = CancelToken()
    delivered = []
    loop = asyncio.get_running_loop()
    loop.call_later(0.05, token.cancel)
    start = loop.time()

    scheduler = ReplayScheduler(speed=1, poll_interval_ms=20)
    outcome = await asyncio.wait_for(scheduler.run(events, delivered.append, token), timeout=5)

    assert outcome.aborted
    assert len(delivered) == 1
    assert loop.time() - start < 1.0


@pytest.mark.asyncio
async def test_async_callback_is_awaited(store):
    events = _stored(store, [0, 10])
    seen = []

    async def on_event(ev):
        await asyncio.sleep(0)
        seen.append(ev.event.car_id)

    outcome = await ReplayScheduler(speed=1, sleep=VirtualSleep()).run(events, on_event)

    assert seen == ["C0", "C1"]
    assert outcome.completed


@pytest.mark.asyncio
async def test_callback_errors_propagate(store):
    events = _stored(store, [0])

    def boom(ev):
        raise RuntimeError("subscriber gone")

    with pytest.raises(RuntimeError):
        await ReplayScheduler(speed=1).run(events, boom)


@pytest.mark.asyncio
async def test_independent_schedulers_run_concurrently(store):
    events = _stored(store, [0, 50, 100])
    a, b = [], []

    out_a, out_b = await asyncio.gather(
        ReplayScheduler(speed=1).run(events, a.append),
        ReplayScheduler(speed=4).run(events, b.append),
    )

    assert out_a.delivered == out_b.delivered == 3
    assert a == b == events


@pytest.mark.parametrize("speed", [0, -1, float("nan"), float("inf"), True])
def test_invalid_speed_rejected(speed):
    with pytest.raises(ValidationError):
        ReplayScheduler(speed=speed)
