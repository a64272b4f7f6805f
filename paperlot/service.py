"""
Lot service: the command/query seam for outer layers.

Wires the event log and the live projector together. A command appends to
the log and projects the stored event; reads go either to the projector
(live) or to the log plus fold (time travel); replays query the log once and
hand the slice to a ReplayScheduler.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import Settings
from .core.clock import SystemClock
from .core.codec import event_from_dict
from .core.errors import ValidationError
from .core.events import (
    XY,
    CarEntered,
    CarExited,
    CarMoved,
    DomainEvent,
    SpotOccupied,
    SpotVacated,
    StoredEvent,
)
from .core.state import LotState
from .log.jsonl import load_into
from .log.memory_store import InMemoryEventStore
from .log.store import EventStore
from .logging_config import get_logger
from .projection.projector import Projector
from .replay.runner import state_at
from .replay.scheduler import AbortPredicate, EventCallback, ReplayOutcome, ReplayScheduler

PointLike = Union[XY, Sequence[float], Dict[str, float]]


def _point(value: PointLike) -> Any:
    """Coerce (x, y) or {"x", "y"} to XY; anything else is left for validation."""
    if isinstance(value, dict) and "x" in value and "y" in value:
        return XY(x=value["x"], y=value["y"])
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return XY(x=value[0], y=value[1])
    return value


@dataclass(frozen=True)
class CommandResult:
    """Stored envelope plus the lot's live state after projecting it."""
    stored: StoredEvent
    current: LotState

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "stored": self.stored.to_dict(), "current": self.current.to_dict()}


class LotService:
    """
    Command/query facade over one event log and one projector.

    Instances are independent; tests build their own instead of sharing
    process-wide state.
    """

    def __init__(
        self,
        store: Optional[EventStore] = None,
        projector: Optional[Projector] = None,
        clock=None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.clock = clock or SystemClock()
        self.store = store or InMemoryEventStore(clock=self.clock)
        self.projector = projector or Projector()
        self.settings = settings or Settings()
        # Log and projection must see commands in the same order.
        self._command_lock = threading.Lock()

    # Commands

    def record(self, event: DomainEvent) -> CommandResult:
        """
        Append an event and project it.

        Raises:
            ValidationError: Nothing is appended or projected
        """
        with self._command_lock:
            stored = self.store.append(getattr(event, "lot_id", None), event)
            current = self.projector.apply(stored.event)

        get_logger(__name__, lot_id=stored.stream_id).debug(
            "Recorded %s %s", stored.type, stored.event_id
        )
        return CommandResult(stored=stored, current=current)

    def record_dict(self, data: Dict[str, Any]) -> CommandResult:
        """Decode a wire dict (occurredAt defaults to now) and record it."""
        return self.record(event_from_dict(data, default_occurred_at=self.clock.now()))

    def _when(self, occurred_at: Optional[str]) -> str:
        return occurred_at if occurred_at is not None else self.clock.now()

    def enter_car(
        self, lot_id: str, car_id: str, pos: PointLike, occurred_at: Optional[str] = None
    ) -> CommandResult:
        return self.record(
            CarEntered(lot_id=lot_id, car_id=car_id, pos=_point(pos), occurred_at=self._when(occurred_at))
        )

    def move_car(
        self,
        lot_id: str,
        car_id: str,
        from_pos: PointLike,
        to_pos: PointLike,
        occurred_at: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ) -> CommandResult:
        return self.record(
            CarMoved(
                lot_id=lot_id,
                car_id=car_id,
                from_pos=_point(from_pos),
                to_pos=_point(to_pos),
                occurred_at=self._when(occurred_at),
                duration_ms=duration_ms,
            )
        )

    def exit_car(self, lot_id: str, car_id: str, occurred_at: Optional[str] = None) -> CommandResult:
        return self.record(CarExited(lot_id=lot_id, car_id=car_id, occurred_at=self._when(occurred_at)))

    def occupy_spot(
        self, lot_id: str, car_id: str, spot_id: str, occurred_at: Optional[str] = None
    ) -> CommandResult:
        return self.record(
            SpotOccupied(lot_id=lot_id, car_id=car_id, spot_id=spot_id, occurred_at=self._when(occurred_at))
        )

    def vacate_spot(
        self, lot_id: str, car_id: str, spot_id: str, occurred_at: Optional[str] = None
    ) -> CommandResult:
        return self.record(
            SpotVacated(lot_id=lot_id, car_id=car_id, spot_id=spot_id, occurred_at=self._when(occurred_at))
        )

    def load(self, path: str) -> List[StoredEvent]:
        """
        Import a JSONL fixture and rebuild the projections it touched.

        The batch is atomic: an invalid line leaves log and projections as they were.
        """
        with self._command_lock:
            stored = load_into(self.store, path)
            for stream_id in sorted({s.stream_id for s in stored}):
                self.projector.rebuild(self.store, stream_id)
        return stored

    # Queries

    def current(self, lot_id: str) -> LotState:
        return self.projector.get(lot_id)

    def events(
        self, lot_id: str, from_: Optional[str] = None, to: Optional[str] = None
    ) -> List[StoredEvent]:
        return self.store.query_by_time(lot_id, from_, to)

    def state_at(self, lot_id: str, at: str) -> LotState:
        """
        Time travel: the lot as of ``at``.

        Raises:
            ValidationError: If at is missing or not a valid timestamp
        """
        if not at:
            raise ValidationError("at required", field="at")
        return state_at(self.store, lot_id, at).state

    async def replay(
        self,
        lot_id: str,
        on_event: EventCallback,
        start: Optional[str] = None,
        speed: float = 1.0,
        should_abort: Optional[AbortPredicate] = None,
        end: Optional[str] = None,
    ) -> ReplayOutcome:
        """
        Re-deliver a lot's history from ``start`` at ``speed``.

        The log is queried once, up front; events appended during the
        replay are not included.
        """
        scheduler = ReplayScheduler(speed=speed, poll_interval_ms=self.settings.replay_poll_ms)
        events = self.store.query_by_time(lot_id, start, end)
        get_logger(__name__, lot_id=lot_id).info(
            "Replay requested from %s at %sx (%d events)", start or "beginning", speed, len(events)
        )
        return await scheduler.run(events, on_event, should_abort)
