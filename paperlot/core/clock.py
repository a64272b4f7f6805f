"""
Time source and timestamp helpers.

Every timestamp the kernel emits is textual ISO 8601 in UTC with millisecond
resolution (``2024-05-01T08:00:00.000Z``), so string order matches time order.
"""

from datetime import datetime, timedelta, timezone

from .errors import ValidationError


def parse_iso(value: str, field: str = "occurredAt") -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z`` or a numeric offset. Naive timestamps are
    interpreted as UTC.

    Raises:
        ValidationError: If value is not a string or does not parse
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid ISO time: {value!r}", field=field)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid ISO time: {value!r}", field=field) from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """Format an aware datetime as canonical UTC millisecond text."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return f"{dt.year:04d}-" + dt.strftime("%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def must_iso(value: str, field: str = "occurredAt") -> str:
    """Normalize a timestamp to canonical form or raise ValidationError."""
    return format_iso(parse_iso(value, field=field))


def ms_between(a: str, b: str) -> float:
    """Milliseconds from timestamp a to timestamp b (negative if b is earlier)."""
    return (parse_iso(b) - parse_iso(a)) / timedelta(milliseconds=1)


def iso_now() -> str:
    return format_iso(datetime.now(timezone.utc))


class SystemClock:
    """Wall-clock time source used for ingestion timestamps."""

    def now(self) -> str:
        return iso_now()


class ManualClock:
    """
    Hand-driven clock.

    Starts at ``start`` and only moves when ``advance`` is called, so tests
    get stable createdAt values.
    """

    def __init__(self, start: str = "2024-01-01T00:00:00.000Z") -> None:
        self._current = parse_iso(start, field="start")

    def now(self) -> str:
        return format_iso(self._current)

    def advance(self, ms: int = 1) -> str:
        self._current = self._current + timedelta(milliseconds=ms)
        return self.now()
