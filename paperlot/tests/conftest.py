"""
Shared fixtures for lot kernel tests.
"""

import pytest

from paperlot.core.clock import ManualClock
from paperlot.log.memory_store import InMemoryEventStore
from paperlot.service import LotService


@pytest.fixture
def clock():
    return ManualClock(start="2024-06-01T00:00:00.000Z")


@pytest.fixture
def store(clock):
    return InMemoryEventStore(clock=clock)


@pytest.fixture
def service(store, clock):
    return LotService(store=store, clock=clock)
