from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
import logging

from home_energy.core.config import settings
from home_energy.schemas.user import TokenData

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Generate password hash"""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[TokenData]:
    """Decode a JWT; None when it is invalid, expired or has no subject"""
    try:
        # jose rejects expired tokens itself
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        return None

    return TokenData(
        user_id=user_id,
        username=payload.get("username"),
        role=payload.get("role"),
    )


def generate_token_response(user_data: dict) -> dict:
    """Generate complete token response"""
    token_data = {
        "sub": str(user_data["id"]),
        "username": user_data["username"],
        "role": user_data["role"],
    }

    access_token = create_access_token(
        data=token_data,
        expires_delta=timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    )

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": settings.JWT_EXPIRE_MINUTES * 60,
        "user": user_data,
    }
