import sys
import os
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from scribe.record_store import MemoryRecordStore
from scribe.studio import Studio


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def studio(store, clock):
    return Studio(store, clock=clock, auth_latency=0)
