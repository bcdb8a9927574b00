from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging
import uuid

from home_energy.models.user import User
from home_energy.schemas.user import UserCreate, UserUpdate
from home_energy.core.security import get_password_hash, verify_password
from home_energy.core.redis_client import token_store

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(self, user_data: UserCreate) -> Optional[User]:
        """Create a new user; None when the username or email is taken"""
        if await self.get_user_by_username_or_email(user_data.username, user_data.email):
            return None

        db_user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=user_data.role,
        )

        try:
            self.db.add(db_user)
            await self.db.commit()
            await self.db.refresh(db_user)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"User creation failed - integrity error: {e}")
            return None
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"User created successfully: {user_data.username} ({user_data.role})")
        return db_user

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        stmt = select(User).where(or_(User.username == username, User.email == email))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        """Authenticate user with username and password"""
        user = await self.get_user_by_username(username)
        if not user or not user.is_active:
            return None

        if not verify_password(password, user.password_hash):
            return None

        await token_store.clear(str(user.id))

        logger.info(f"User authenticated successfully: {username}")
        return user

    async def update_profile(self, user_id: uuid.UUID, user_data: UserUpdate) -> Optional[User]:
        """Update username, email and optionally the password.

        Returns None when the user is missing or the new username/email
        belongs to someone else.
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            return None

        if user_data.username is not None and user_data.username != user.username:
            if await self.get_user_by_username(user_data.username):
                return None
            user.username = user_data.username

        if user_data.email is not None and user_data.email != user.email:
            result = await self.db.execute(select(User).where(User.email == user_data.email))
            if result.scalar_one_or_none():
                return None
            user.email = user_data.email

        if user_data.password:
            user.password_hash = get_password_hash(user_data.password)

        try:
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"User update failed - integrity error: {e}")
            return None
        except Exception:
            await self.db.rollback()
            raise

        if user_data.password:
            await token_store.revoke(str(user.id))

        logger.info(f"User updated successfully: {user_id}")
        return user

    async def logout(self, user_id: uuid.UUID) -> bool:
        """Revoke every token issued to the user"""
        return await token_store.revoke(str(user_id))


def get_user_service(db: AsyncSession) -> UserService:
    """Dependency to get user service"""
    return UserService(db)
