from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from home_energy.models.device import DeviceStatus


class DeviceBase(BaseModel):
    """Base device schema"""
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=100, description="AC, FAN, LIGHT or any other category")
    icon: Optional[str] = Field(None, max_length=100)
    intensity: Optional[int] = Field(None, ge=0, le=100)
    temperature: Optional[int] = Field(None, ge=0, le=50)

    @field_validator("name", "type")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class DeviceCreate(DeviceBase):
    """Schema for device creation.

    Consumption and metering fields are accepted for compatibility with older
    clients but are always discarded on create.
    """
    status: Optional[DeviceStatus] = None
    consumption_kwh: Optional[float] = None
    last_on_at: Optional[datetime] = None


class DeviceUpdate(DeviceBase):
    """Schema for device detail updates"""


class DeviceResponse(BaseModel):
    """Schema for device response"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    type: str
    status: DeviceStatus
    consumption_kwh: float
    last_on_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None
    icon: Optional[str] = None
    intensity: Optional[int] = None
    temperature: Optional[int] = None


class DeviceConsumption(BaseModel):
    """Per-device line of the energy summary"""
    id: uuid.UUID
    name: str
    type: str
    status: DeviceStatus
    power_watts: float
    consumption_kwh: float


class EnergySummary(BaseModel):
    """Schema for energy consumption summary"""
    total_devices: int
    active_devices: int
    total_consumption_kwh: float
    devices: List[DeviceConsumption]
