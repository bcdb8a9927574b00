from enum import Enum
from typing import Dict, FrozenSet

from home_energy.core.exceptions import PermissionDeniedError


class Role(str, Enum):
    OWNER = "OWNER"
    FAMILY_MEMBER = "FAMILY_MEMBER"
    GUEST = "GUEST"


class DeviceAction(str, Enum):
    VIEW = "view devices"
    ADD = "add devices"
    TOGGLE = "toggle devices"
    UPDATE = "update device details"
    DELETE = "delete devices"


ROLE_PERMISSIONS: Dict[Role, FrozenSet[DeviceAction]] = {
    Role.OWNER: frozenset(DeviceAction),
    Role.FAMILY_MEMBER: frozenset({DeviceAction.VIEW, DeviceAction.TOGGLE}),
    Role.GUEST: frozenset({DeviceAction.VIEW}),
}


def has_permission(role: str, action: DeviceAction) -> bool:
    """Check whether a role may perform an action; unknown roles get nothing"""
    try:
        resolved = Role(role)
    except ValueError:
        return False
    return action in ROLE_PERMISSIONS[resolved]


def ensure_permission(role: str, action: DeviceAction) -> None:
    """Raise PermissionDeniedError unless the role allows the action"""
    if not has_permission(role, action):
        raise PermissionDeniedError(role, action.value)
