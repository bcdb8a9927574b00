import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, Optional, Tuple, Union
import uuid

from home_energy.core.clock import Clock, ensure_utc, utc_now
from home_energy.core.exceptions import DeviceNotFoundError, InvalidDeviceStatusError
from home_energy.core.logging import get_logger
from home_energy.models.device import Device, DeviceStatus
from home_energy.repositories.device_repository import DeviceRepository

logger = get_logger(__name__)

# (type substring, watts); first match wins
POWER_RATINGS_WATTS: Tuple[Tuple[str, float], ...] = (
    ("ac", 1500.0),
    ("fan", 150.0),
    ("light", 50.0),
)
DEFAULT_POWER_WATTS = 100.0


def get_power_rating_watts(device_type: Optional[str]) -> float:
    """Nominal wattage for a device type.

    Matching is a case-insensitive substring test, so "Window AC" and
    "ceiling-fan" resolve to the AC and fan ratings. Anything unmatched,
    including a missing type, gets DEFAULT_POWER_WATTS.
    """
    if not device_type:
        return DEFAULT_POWER_WATTS

    lowered = device_type.lower()
    for needle, watts in POWER_RATINGS_WATTS:
        if needle in lowered:
            return watts
    return DEFAULT_POWER_WATTS


def get_power_rating_kw(device_type: Optional[str]) -> float:
    return get_power_rating_watts(device_type) / 1000.0


def parse_status(value: Union[str, DeviceStatus]) -> DeviceStatus:
    """Coerce a requested status into DeviceStatus"""
    if isinstance(value, DeviceStatus):
        return value
    if not isinstance(value, str):
        raise InvalidDeviceStatusError(value)
    try:
        return DeviceStatus(value.strip().upper())
    except ValueError:
        raise InvalidDeviceStatusError(value)


def energy_used_kwh(device_type: Optional[str], started_at: Optional[datetime], ended_at: datetime) -> float:
    """Energy drawn between two instants at the type's nominal rating"""
    if started_at is None:
        return 0.0

    elapsed_seconds = (ensure_utc(ended_at) - ensure_utc(started_at)).total_seconds()
    if elapsed_seconds <= 0:
        return 0.0
    return get_power_rating_kw(device_type) * (elapsed_seconds / 3600.0)


class DeviceLocks:
    """Per-device asyncio locks shared by every engine in the process.

    An entry lives only while some coroutine holds or waits on it, so ids
    that are never found do not accumulate.
    """

    def __init__(self) -> None:
        self._locks: Dict[uuid.UUID, asyncio.Lock] = {}
        self._holders: Dict[uuid.UUID, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, device_id: uuid.UUID) -> AsyncIterator[None]:
        lock = self._locks.get(device_id)
        if lock is None:
            lock = self._locks[device_id] = asyncio.Lock()
        self._holders[device_id] = self._holders.get(device_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[device_id] -= 1
            if not self._holders[device_id]:
                del self._holders[device_id]
                del self._locks[device_id]


device_locks = DeviceLocks()


class EnergyAccountingEngine:
    """Applies ON/OFF transitions and accrues consumption at switch-off.

    Accrual is lazy: nothing runs while a device is on; the interval since
    ``last_on_at`` is credited when the OFF request arrives.
    """

    def __init__(
        self,
        repository: DeviceRepository,
        clock: Clock = utc_now,
        locks: Optional[DeviceLocks] = None,
    ):
        self.repository = repository
        self.clock = clock
        self.locks = locks if locks is not None else device_locks

    async def apply_status_transition(
        self,
        device_id: uuid.UUID,
        new_status: Union[str, DeviceStatus],
        now: Optional[datetime] = None,
    ) -> Device:
        """Switch a device ON or OFF and persist the result.

        Turning a running device OFF adds ``power_kw * hours_on`` to its
        cumulative consumption. Turning a device ON always restarts the
        metering window, even when it is already ON; the interval that was
        running is dropped, not credited.
        """
        status = parse_status(new_status)
        now = now or self.clock()

        async with self.locks.hold(device_id):
            device = await self.repository.find_by_id(device_id)
            if device is None:
                raise DeviceNotFoundError(device_id)

            previous_status = device.status
            energy_used = 0.0

            if status == DeviceStatus.OFF and device.status == DeviceStatus.ON:
                energy_used = energy_used_kwh(device.type, device.last_on_at, now)
                device.consumption_kwh = (device.consumption_kwh or 0.0) + energy_used
                device.last_on_at = None

            if status == DeviceStatus.ON:
                device.last_on_at = now

            device.status = status
            device.last_seen_at = now

            saved = await self.repository.save(device)

        logger.info(
            "Device status updated",
            device_id=device_id,
            previous=previous_status.value if previous_status else None,
            status=status.value,
            energy_used_kwh=round(energy_used, 6),
            consumption_kwh=round(saved.consumption_kwh, 6),
        )
        return saved
