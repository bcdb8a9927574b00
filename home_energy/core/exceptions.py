"""Domain errors raised by the device registry and energy accounting engine.

Storage failures are not wrapped here: whatever the repository raises reaches
the caller unchanged.
"""

from typing import Any


class HomeEnergyError(Exception):
    """Base class for service errors"""


class DeviceNotFoundError(HomeEnergyError):
    """Referenced device id does not exist"""

    def __init__(self, device_id: Any):
        self.device_id = device_id
        super().__init__(f"Device not found: {device_id}")


class InvalidDeviceStatusError(HomeEnergyError, ValueError):
    """Requested status is not ON or OFF"""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid device status: {value!r}. Must be ON or OFF")


class ConcurrentUpdateError(HomeEnergyError):
    """Device was modified by another writer since it was read"""

    def __init__(self, device_id: Any):
        self.device_id = device_id
        super().__init__(f"Device {device_id} was modified concurrently")


class PermissionDeniedError(HomeEnergyError):
    """Caller's role does not allow the requested action"""

    def __init__(self, role: Any, action: str):
        self.role = role
        self.action = action
        super().__init__(f"Access denied: role {role} cannot {action}")
