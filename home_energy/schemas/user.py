from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
import re
import uuid

ROLE_PATTERN = "^(OWNER|FAMILY_MEMBER|GUEST)$"


def validate_password_strength(password: str) -> str:
    """At least 8 characters with an uppercase letter, a lowercase letter and a digit"""
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", password) or not re.search(r"[a-z]", password) or not re.search(r"\d", password):
        raise ValueError("Password must contain uppercase, lowercase, and digit characters")
    return password


class UserBase(BaseModel):
    """Base user schema"""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user signup"""
    password: str = Field(..., min_length=8, max_length=128)
    role: str = Field(default="GUEST")

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
        if not re.match(ROLE_PATTERN, v or ""):
            raise ValueError("Invalid role. Must be OWNER, FAMILY_MEMBER, or GUEST")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)


class UserUpdate(BaseModel):
    """Schema for profile updates"""
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, max_length=128)
    confirm_password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_password_strength(v)


class UserResponse(UserBase):
    """Schema for user response"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserLogin(BaseModel):
    """Schema for user login"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    """Schema for JWT token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class TokenData(BaseModel):
    """Schema for token data"""
    user_id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None


class UserProfile(UserResponse):
    """Schema for user profile"""
