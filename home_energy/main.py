from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
import uvicorn
import logging
from contextlib import asynccontextmanager

from home_energy.core.config import settings
from home_energy.core.database import init_db, close_db
from home_energy.core.redis_client import init_redis, close_redis
from home_energy.api.v1.api import api_router
from home_energy.core.logging import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting up {settings.APP_NAME}...")
    await init_db()
    await init_redis()
    logger.info(f"{settings.APP_NAME} startup complete")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_redis()
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Device registry, role-based control and energy accounting for smart homes",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.ALLOWED_HOSTS
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/api/health")
async def health_check():
    """Main health check endpoint"""
    return {
        "status": "healthy",
        "service": "home-energy",
        "version": settings.VERSION,
        "modules": ["auth", "devices"],
    }


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": settings.APP_NAME,
        "description": "Device management and energy tracking",
        "version": settings.VERSION,
        "docs": "/docs",
        "modules": ["auth", "devices"]
    }


if __name__ == "__main__":
    uvicorn.run(
        "home_energy.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
