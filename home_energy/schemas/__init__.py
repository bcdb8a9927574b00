from .user import (
    UserBase, UserCreate, UserUpdate, UserResponse, UserLogin,
    Token, TokenData, UserProfile
)
from .device import (
    DeviceBase, DeviceCreate, DeviceUpdate, DeviceResponse,
    DeviceConsumption, EnergySummary
)

__all__ = [
    # User schemas
    "UserBase", "UserCreate", "UserUpdate", "UserResponse", "UserLogin",
    "Token", "TokenData", "UserProfile",

    # Device schemas
    "DeviceBase", "DeviceCreate", "DeviceUpdate", "DeviceResponse",
    "DeviceConsumption", "EnergySummary",
]
