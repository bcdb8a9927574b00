from typing import List, Optional
import uuid

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from home_energy.core.exceptions import ConcurrentUpdateError
from home_energy.models.device import Device
from home_energy.repositories.device_repository import DeviceRepository


class SQLAlchemyDeviceRepository(DeviceRepository):
    """Relational implementation of DeviceRepository.

    Optimistic locking comes from the mapper's ``version_id_col``: an UPDATE
    whose version predicate matches no row surfaces as StaleDataError.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_id(self, device_id: uuid.UUID) -> Optional[Device]:
        return await self.db.get(Device, device_id)

    async def find_all(self) -> List[Device]:
        result = await self.db.execute(select(Device).order_by(Device.name))
        return list(result.scalars().all())

    async def save(self, device: Device) -> Device:
        # attributes expire on rollback and cannot be lazy-loaded under asyncio
        device_id = device.id
        self.db.add(device)
        try:
            await self.db.commit()
        except StaleDataError:
            await self.db.rollback()
            raise ConcurrentUpdateError(device_id)
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(device)
        return device

    async def delete_by_id(self, device_id: uuid.UUID) -> None:
        try:
            await self.db.execute(delete(Device).where(Device.id == device_id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
