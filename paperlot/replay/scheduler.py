"""
Paced replay of a historical event slice.

Delivers stored events to a subscriber one at a time, waiting between events
for the recorded gap divided by a speed factor. Cancellation is cooperative:
an abort predicate (or CancelToken) is polled before every delivery and
between sleep slices, so a cancel takes effect within one poll interval
however far apart the events are.
"""

import asyncio
import inspect
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from ..core.clock import ms_between
from ..core.errors import ValidationError
from ..core.events import StoredEvent
from ..metrics import track_replay_delivered, track_replay_session

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 50.0

EventCallback = Callable[[StoredEvent], Union[None, Awaitable[None]]]
AbortPredicate = Callable[[], bool]
Sleeper = Callable[[float], Awaitable[Any]]


class CancelToken:
    """
    Cancellation flag shared between a replay and whoever may stop it.

    Callable, so it can be passed wherever an abort predicate is expected.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __call__(self) -> bool:
        return self._cancelled


@dataclass(frozen=True)
class ReplayOutcome:
    """
    How a paced replay ended.

    Fields:
        delivered: Number of events handed to the callback
        total: Number of events in the slice
        aborted: True if the abort predicate stopped the replay early
    """
    delivered: int
    total: int
    aborted: bool

    @property
    def completed(self) -> bool:
        return not self.aborted and self.delivered == self.total


def _never() -> bool:
    return False


class ReplayScheduler:
    """
    Time-scaled delivery of an ordered event slice.

    One scheduler run handles one event at a time; independent runs (one per
    client session) share no state and may overlap freely.

    Usage:
        token = CancelToken()
        scheduler = ReplayScheduler(speed=2.0)
        outcome = await scheduler.run(events, send, token)
    """

    def __init__(
        self,
        speed: float = 1.0,
        poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """
        Args:
            speed: Playback multiplier (> 0); 2.0 plays twice as fast
            poll_interval_ms: Longest single sleep before re-checking abort
            sleep: Awaitable sleep taking seconds
        """
        valid = isinstance(speed, (int, float)) and not isinstance(speed, bool)
        if not valid or not math.isfinite(speed) or speed <= 0:
            raise ValidationError(f"speed must be a positive number, got {speed!r}", field="speed")
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        self.speed = float(speed)
        self.poll_interval_ms = float(poll_interval_ms)
        self._sleep = sleep

    def delay_ms(self, prev: StoredEvent, cur: StoredEvent) -> float:
        """Scaled wait before delivering cur after prev (may be <= 0)."""
        return ms_between(prev.occurred_at, cur.occurred_at) / self.speed

    async def _wait(self, wait_ms: float, should_abort: AbortPredicate) -> bool:
        """Sleep wait_ms in poll-sized slices. Returns False if aborted."""
        remaining = wait_ms
        while remaining > 0:
            if should_abort():
                return False
            step = min(remaining, self.poll_interval_ms)
            await self._sleep(step / 1000.0)
            remaining -= step
        return True

    async def run(
        self,
        events: Sequence[StoredEvent],
        on_event: EventCallback,
        should_abort: Optional[AbortPredicate] = None,
    ) -> ReplayOutcome:
        """
        Deliver events paced by their recorded gaps.

        The first event is delivered without waiting. Aborting is a normal
        end: the outcome reports aborted=True and no exception is raised.
        Exceptions raised by on_event propagate to the caller.

        Args:
            events: Slice ordered ascending by occurredAt
            on_event: Callback receiving each StoredEvent (sync or async)
            should_abort: Predicate polled before every delivery and sleep

        Returns:
            ReplayOutcome
        """
        should_abort = should_abort or _never
        total = len(events)
        delivered = 0

        if total == 0:
            return ReplayOutcome(delivered=0, total=0, aborted=False)

        logger.info("Replay started: %d events at %sx", total, self.speed)
        with track_replay_session():
            prev: Optional[StoredEvent] = None
            for ev in events:
                if prev is not None:
                    wait = self.delay_ms(prev, ev)
                    if wait > 0 and not await self._wait(wait, should_abort):
                        break
                if should_abort():
                    break

                result = on_event(ev)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
                track_replay_delivered()
                prev = ev

        aborted = delivered < total
        if aborted:
            logger.info("Replay aborted after %d/%d events", delivered, total)
        else:
            logger.info("Replay finished: %d events delivered", delivered)
        return ReplayOutcome(delivered=delivered, total=total, aborted=aborted)


async def replay_events_as_stream(
    events: Sequence[StoredEvent],
    speed: float,
    on_event: EventCallback,
    should_abort: Optional[AbortPredicate] = None,
    poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
) -> ReplayOutcome:
    """One-shot helper: build a ReplayScheduler and run it."""
    scheduler = ReplayScheduler(speed=speed, poll_interval_ms=poll_interval_ms)
    return await scheduler.run(events, on_event, should_abort)
