from typing import List, Optional
import uuid

from home_energy.core.clock import Clock, utc_now
from home_energy.core.exceptions import DeviceNotFoundError
from home_energy.core.logging import get_logger
from home_energy.models.device import Device, DeviceStatus
from home_energy.repositories.device_repository import DeviceRepository
from home_energy.schemas.device import DeviceCreate, DeviceUpdate, DeviceConsumption, EnergySummary
from home_energy.services.energy_service import (
    DeviceLocks,
    EnergyAccountingEngine,
    device_locks,
    get_power_rating_watts,
)

logger = get_logger(__name__)


class DeviceService:
    """Service layer for the device registry"""

    def __init__(
        self,
        repository: DeviceRepository,
        clock: Clock = utc_now,
        locks: Optional[DeviceLocks] = None,
    ):
        self.repository = repository
        self.clock = clock
        self.locks = locks if locks is not None else device_locks
        self.engine = EnergyAccountingEngine(repository, clock=clock, locks=self.locks)

    async def list_all(self) -> List[Device]:
        """All devices; access filtering is the caller's concern"""
        return await self.repository.find_all()

    async def get(self, device_id: uuid.UUID) -> Device:
        device = await self.repository.find_by_id(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)
        return device

    async def add(self, draft: DeviceCreate) -> Device:
        """Register a new device.

        Consumption, status and the metering timestamp in the draft are
        ignored: every device starts OFF with nothing consumed.
        """
        device = Device(
            name=draft.name,
            type=draft.type,
            icon=draft.icon,
            intensity=draft.intensity,
            temperature=draft.temperature,
            status=DeviceStatus.OFF,
            consumption_kwh=0.0,
            last_on_at=None,
            last_seen_at=self.clock(),
        )
        saved = await self.repository.save(device)
        logger.info("Device added", device_id=saved.id, name=saved.name, type=saved.type)
        return saved

    async def set_status(self, device_id: uuid.UUID, status: str) -> Device:
        return await self.engine.apply_status_transition(device_id, status)

    async def update_details(self, device_id: uuid.UUID, patch: DeviceUpdate) -> Device:
        """Overwrite name and type (and any cosmetic field supplied).

        Status, consumption and the metering timestamp are left alone.
        """
        async with self.locks.hold(device_id):
            device = await self.get(device_id)

            device.name = patch.name
            device.type = patch.type
            for field in ("icon", "intensity", "temperature"):
                value = getattr(patch, field)
                if value is not None:
                    setattr(device, field, value)
            device.last_seen_at = self.clock()

            saved = await self.repository.save(device)

        logger.info("Device updated", device_id=device_id, name=saved.name, type=saved.type)
        return saved

    async def delete(self, device_id: uuid.UUID) -> None:
        """Hard-delete a device; unknown ids raise DeviceNotFoundError"""
        async with self.locks.hold(device_id):
            await self.get(device_id)
            await self.repository.delete_by_id(device_id)
        logger.info("Device deleted", device_id=device_id)

    async def summarize(self) -> EnergySummary:
        """Cumulative consumption across all devices, biggest consumers first"""
        devices = await self.repository.find_all()

        lines = [
            DeviceConsumption(
                id=device.id,
                name=device.name,
                type=device.type,
                status=device.status,
                power_watts=get_power_rating_watts(device.type),
                consumption_kwh=device.consumption_kwh or 0.0,
            )
            for device in devices
        ]
        lines.sort(key=lambda line: line.consumption_kwh, reverse=True)

        return EnergySummary(
            total_devices=len(lines),
            active_devices=sum(1 for line in lines if line.status == DeviceStatus.ON),
            total_consumption_kwh=sum(line.consumption_kwh for line in lines),
            devices=lines,
        )


def get_device_service(repository: DeviceRepository) -> DeviceService:
    """Build a device service over a repository"""
    return DeviceService(repository)
