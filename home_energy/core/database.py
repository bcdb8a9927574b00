from typing import AsyncGenerator, Optional
import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from home_energy.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models"""


engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker] = None


def _engine_kwargs(url: str) -> dict:
    # SQLite (tests, local runs) rejects pool sizing arguments
    if url.startswith("sqlite"):
        return {"echo": settings.DATABASE_ECHO}
    return {
        "echo": settings.DATABASE_ECHO,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


def get_engine() -> AsyncEngine:
    """Create the async engine on first use"""
    global engine, SessionLocal

    if engine is None:
        engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
        SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    return engine


async def init_db() -> None:
    """Create database tables"""
    # Import models so they register with the metadata
    from home_energy import models  # noqa: F401

    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


async def close_db() -> None:
    """Dispose the engine and its connection pool"""
    global engine, SessionLocal

    if engine is not None:
        await engine.dispose()
        engine = None
        SessionLocal = None
        logger.info("Database connections closed")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency yielding a database session per request"""
    get_engine()
    async with SessionLocal() as session:
        yield session
