from fastapi import APIRouter

from home_energy.api.v1.endpoints import auth, devices

api_router = APIRouter()

# Include auth endpoints
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])

# Include device endpoints
api_router.include_router(devices.router, prefix="/devices", tags=["devices"])
