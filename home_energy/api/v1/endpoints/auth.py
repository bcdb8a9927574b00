from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from home_energy.core.database import get_db
from home_energy.core.deps import AuthUser, get_current_user, get_current_active_user
from home_energy.core.security import generate_token_response
from home_energy.schemas.user import UserCreate, UserLogin, Token, UserUpdate, UserProfile
from home_energy.models.user import User
from home_energy.services.user_service import get_user_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a new user with a role"""
    try:
        user_service = get_user_service(db)

        user = await user_service.create_user(user_data)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username or email already registered"
            )

        logger.info(f"User registered successfully: {user.username}")
        return Token(**generate_token_response(user.to_dict()))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Signup error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Signup failed"
        )


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate user and return JWT token"""
    try:
        user_service = get_user_service(db)

        user = await user_service.authenticate_user(login_data.username, login_data.password)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password"
            )

        logger.info(f"User logged in successfully: {user.username}")
        return Token(**generate_token_response(user.to_dict()))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed"
        )


@router.get("/me", response_model=UserProfile)
async def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """Get current user profile"""
    return UserProfile.model_validate(current_user)


@router.put("/me", response_model=UserProfile)
async def update_current_user_profile(
    user_update: UserUpdate,
    current_user: AuthUser = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Update username, email and optionally password"""
    if user_update.password and user_update.password != user_update.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match"
        )

    try:
        user_service = get_user_service(db)

        updated_user = await user_service.update_profile(uuid.UUID(current_user.id), user_update)
        if not updated_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid email or update failed"
            )

        logger.info(f"User profile updated: {current_user.username}")
        return UserProfile.model_validate(updated_user)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Profile update error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Profile update failed"
        )


@router.post("/logout")
async def logout(
    current_user: AuthUser = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Logout user (revoke all tokens)"""
    user_service = get_user_service(db)
    if not await user_service.logout(uuid.UUID(current_user.id)):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Logout failed: token revocation unavailable"
        )

    logger.info(f"User logged out: {current_user.username}")
    return {"message": "Logged out successfully"}
