from typing import Any, Dict, List, Optional
import uuid

from home_energy.core.exceptions import ConcurrentUpdateError
from home_energy.models.device import Device, DeviceStatus
from home_energy.repositories.device_repository import DeviceRepository

_FIELDS = (
    "id", "name", "type", "status", "consumption_kwh", "last_on_at",
    "last_seen_at", "icon", "intensity", "temperature", "version",
)


class InMemoryDeviceRepository(DeviceRepository):
    """Process-local DeviceRepository.

    Rows are kept as plain dicts and every read hands out a fresh, detached
    Device, so two readers never share an instance and the version check
    behaves like the relational one.
    """

    def __init__(self) -> None:
        self._rows: Dict[uuid.UUID, Dict[str, Any]] = {}

    def _to_row(self, device: Device) -> Dict[str, Any]:
        return {field: getattr(device, field) for field in _FIELDS}

    def _to_device(self, row: Dict[str, Any]) -> Device:
        return Device(**row)

    async def find_by_id(self, device_id: uuid.UUID) -> Optional[Device]:
        row = self._rows.get(device_id)
        if row is None:
            return None
        return self._to_device(row)

    async def find_all(self) -> List[Device]:
        rows = sorted(self._rows.values(), key=lambda row: row["name"] or "")
        return [self._to_device(row) for row in rows]

    async def save(self, device: Device) -> Device:
        if device.id is None:
            device.id = uuid.uuid4()

        stored = self._rows.get(device.id)
        if stored is None:
            device.version = 1
        elif stored["version"] != device.version:
            raise ConcurrentUpdateError(device.id)
        else:
            device.version += 1

        if device.status is None:
            device.status = DeviceStatus.OFF
        if device.consumption_kwh is None:
            device.consumption_kwh = 0.0

        self._rows[device.id] = self._to_row(device)
        return self._to_device(self._rows[device.id])

    async def delete_by_id(self, device_id: uuid.UUID) -> None:
        self._rows.pop(device_id, None)
