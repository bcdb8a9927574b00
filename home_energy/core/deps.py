from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Callable
import logging
import uuid

from home_energy.core.database import get_db
from home_energy.core.exceptions import PermissionDeniedError
from home_energy.core.permissions import DeviceAction, ensure_permission
from home_energy.core.redis_client import token_store
from home_energy.core.security import verify_token
from home_energy.models.user import User
from home_energy.repositories.sqlalchemy_device_repository import SQLAlchemyDeviceRepository
from home_energy.schemas.user import TokenData
from home_energy.services.device_service import DeviceService, get_device_service as build_device_service

logger = logging.getLogger(__name__)

security = HTTPBearer()


class AuthUser:
    """Authenticated caller; role is passed explicitly to permission checks"""
    def __init__(self, user_id: str, username: str, email: str, role: str):
        self.id = user_id
        self.username = username
        self.email = email
        self.role = role


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_token_data(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> TokenData:
    """Extract and verify the bearer token"""
    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise _credentials_exception()
    return token_data


async def get_current_user(
    token_data: TokenData = Depends(get_current_user_token_data),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user from database"""
    if await token_store.is_revoked(token_data.user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked"
        )

    try:
        user_id = uuid.UUID(token_data.user_id)
    except ValueError:
        raise _credentials_exception()

    user = await db.get(User, user_id)
    if user is None:
        raise _credentials_exception()

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Inactive user"
        )
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> AuthUser:
    """Get current active user as AuthUser object"""
    return AuthUser(
        user_id=str(current_user.id),
        username=current_user.username,
        email=current_user.email,
        role=current_user.role,
    )


def require_permission(action: DeviceAction) -> Callable:
    """Dependency factory: the caller's role must allow ``action``"""

    async def dependency(current_user: AuthUser = Depends(get_current_active_user)) -> AuthUser:
        try:
            ensure_permission(current_user.role, action)
        except PermissionDeniedError as e:
            logger.warning(f"{e} (user {current_user.username})")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        return current_user

    return dependency


async def get_device_service(db: AsyncSession = Depends(get_db)) -> DeviceService:
    """Device service bound to the request's database session"""
    return build_device_service(SQLAlchemyDeviceRepository(db))
