from enum import Enum
import uuid

from sqlalchemy import Column, String, DateTime, Float, Integer, Uuid
from sqlalchemy import Enum as SAEnum

from home_energy.core.database import Base


class DeviceStatus(str, Enum):
    ON = "ON"
    OFF = "OFF"


class Device(Base):
    """Smart home device with cumulative energy accounting"""

    __tablename__ = "devices"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    status = Column(
        SAEnum(DeviceStatus, native_enum=False, length=10, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DeviceStatus.OFF,
    )
    consumption_kwh = Column(Float, nullable=False, default=0.0)
    last_on_at = Column(DateTime(timezone=True), nullable=True)  # set only while ON
    last_seen_at = Column(DateTime(timezone=True), nullable=True)
    icon = Column(String(100))
    intensity = Column(Integer)
    temperature = Column(Integer)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_on(self) -> bool:
        return self.status == DeviceStatus.ON

    def __repr__(self) -> str:
        return f"<Device(id={self.id}, name={self.name}, type={self.type}, status={self.status})>"

    def to_dict(self) -> dict:
        """Convert device to dictionary"""
        return {
            "id": str(self.id) if self.id else None,
            "name": self.name,
            "type": self.type,
            "status": self.status.value if self.status else None,
            "consumption_kwh": self.consumption_kwh,
            "last_on_at": self.last_on_at.isoformat() if self.last_on_at else None,
            "last_seen_at": self.last_seen_at.isoformat() if self.last_seen_at else None,
            "icon": self.icon,
            "intensity": self.intensity,
            "temperature": self.temperature,
        }
