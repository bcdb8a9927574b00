from .user import User
from .device import Device, DeviceStatus

__all__ = ["User", "Device", "DeviceStatus"]
