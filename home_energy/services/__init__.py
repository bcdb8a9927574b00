from .user_service import UserService, get_user_service
from .device_service import DeviceService, get_device_service
from .energy_service import EnergyAccountingEngine, DeviceLocks, get_power_rating_watts

__all__ = [
    "UserService", "get_user_service",
    "DeviceService", "get_device_service",
    "EnergyAccountingEngine", "DeviceLocks", "get_power_rating_watts",
]
