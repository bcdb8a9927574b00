from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from home_energy.models.device import Device


class DeviceRepository(ABC):
    """Repository interface - defines contract for device data access"""

    @abstractmethod
    async def find_by_id(self, device_id: uuid.UUID) -> Optional[Device]:
        """Find device by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Device]:
        """Find all devices"""
        pass

    @abstractmethod
    async def save(self, device: Device) -> Device:
        """Save device (insert or update).

        Assigns an id on insert. Raises ConcurrentUpdateError when the stored
        version no longer matches the version the device was read at.
        """
        pass

    @abstractmethod
    async def delete_by_id(self, device_id: uuid.UUID) -> None:
        """Delete device; no-op when absent"""
        pass
