from __future__ import annotations

from pathlib import Path

import pytest

from sitestatus.services.uptime_tracker import UptimeTracker
from sitestatus.store import DataStore

# 2026-03-15 12:00:00 UTC
BASE_TS = 1773576000


class FakeClock:
    def __init__(self, now: float = BASE_TS) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def tracker(data_dir: Path, clock: FakeClock) -> UptimeTracker:
    return UptimeTracker(DataStore(data_dir), clock=clock)
