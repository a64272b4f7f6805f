"""
JSONL import of domain events.

Seeds a store from a fixture file: one wire dict per line, as produced by
event_to_dict(). This is an import path, not persistence; nothing is written
back to the file.
"""

import json
from typing import Iterator, List

from ..core.codec import event_from_dict
from ..core.errors import ValidationError
from ..core.events import DomainEvent, StoredEvent
from .store import EventStore


def read_events(path: str) -> Iterator[DomainEvent]:
    """
    Yield validated domain events from a JSONL file.

    Blank lines are skipped.

    Raises:
        FileNotFoundError: If path does not exist
        ValidationError: On bad UTF-8, bad JSON or an invalid event (message names the line)
    """
    with open(path, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                raise ValidationError(f"{path}:{lineno}: invalid UTF-8") from None
            if not line.strip():
                continue
            try:
                yield event_from_dict(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValidationError(f"{path}:{lineno}: invalid JSON: {e.msg}") from None
            except ValidationError as e:
                raise ValidationError(f"{path}:{lineno}: {e}", field=e.field) from None


def load_into(store: EventStore, path: str) -> List[StoredEvent]:
    """Append every event of a JSONL file to store as one batch."""
    return store.extend(list(read_events(path)))
