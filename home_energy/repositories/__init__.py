from .device_repository import DeviceRepository
from .sqlalchemy_device_repository import SQLAlchemyDeviceRepository
from .memory_device_repository import InMemoryDeviceRepository

__all__ = ["DeviceRepository", "SQLAlchemyDeviceRepository", "InMemoryDeviceRepository"]
