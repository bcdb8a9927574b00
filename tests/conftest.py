"""
Shared pytest fixtures for home_energy tests.
"""
import os
from datetime import datetime, timedelta, timezone

# Settings are read at import time; keep hashing cheap and logs quiet
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from home_energy.repositories.memory_device_repository import InMemoryDeviceRepository
from home_energy.services.device_service import DeviceService
from home_energy.services.energy_service import DeviceLocks, EnergyAccountingEngine

T0 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Injectable clock that only moves when told to"""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def locks():
    return DeviceLocks()


@pytest.fixture
def repository():
    return InMemoryDeviceRepository()


@pytest.fixture
def device_service(repository, clock, locks):
    return DeviceService(repository, clock=clock, locks=locks)


@pytest.fixture
def engine(repository, clock, locks):
    return EnergyAccountingEngine(repository, clock=clock, locks=locks)
