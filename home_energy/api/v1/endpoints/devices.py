from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List
import logging
import uuid

from home_energy.core.deps import AuthUser, get_device_service, require_permission
from home_energy.core.exceptions import ConcurrentUpdateError, DeviceNotFoundError, InvalidDeviceStatusError
from home_energy.core.permissions import DeviceAction
from home_energy.schemas.device import DeviceCreate, DeviceUpdate, DeviceResponse, EnergySummary
from home_energy.services.device_service import DeviceService

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(e: DeviceNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _conflict(e: ConcurrentUpdateError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("", response_model=List[DeviceResponse])
async def list_devices(
    current_user: AuthUser = Depends(require_permission(DeviceAction.VIEW)),
    device_service: DeviceService = Depends(get_device_service)
):
    """List every device (all roles)"""
    try:
        devices = await device_service.list_all()
        return [DeviceResponse.model_validate(device) for device in devices]
    except Exception as e:
        logger.error(f"List devices error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve devices"
        )


@router.get("/summary", response_model=EnergySummary)
async def get_energy_summary(
    current_user: AuthUser = Depends(require_permission(DeviceAction.VIEW)),
    device_service: DeviceService = Depends(get_device_service)
):
    """Cumulative energy consumption across all devices"""
    try:
        return await device_service.summarize()
    except Exception as e:
        logger.error(f"Energy summary error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve energy summary"
        )


@router.get("/{device_id}", response_model=DeviceResponse)
async def get_device(
    device_id: uuid.UUID,
    current_user: AuthUser = Depends(require_permission(DeviceAction.VIEW)),
    device_service: DeviceService = Depends(get_device_service)
):
    """Get a single device"""
    try:
        return DeviceResponse.model_validate(await device_service.get(device_id))
    except DeviceNotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(f"Get device error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve device"
        )


@router.post("", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED)
async def add_device(
    device_data: DeviceCreate,
    current_user: AuthUser = Depends(require_permission(DeviceAction.ADD)),
    device_service: DeviceService = Depends(get_device_service)
):
    """Add a device (OWNER only)"""
    try:
        device = await device_service.add(device_data)
        logger.info(f"Device {device.id} added by {current_user.username}")
        return DeviceResponse.model_validate(device)
    except Exception as e:
        logger.error(f"Add device error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add device"
        )


@router.put("/{device_id}/toggle", response_model=DeviceResponse)
async def toggle_device(
    device_id: uuid.UUID,
    status_value: str = Query(..., alias="status", description="ON or OFF"),
    current_user: AuthUser = Depends(require_permission(DeviceAction.TOGGLE)),
    device_service: DeviceService = Depends(get_device_service)
):
    """Switch a device ON or OFF (OWNER, FAMILY_MEMBER)"""
    try:
        device = await device_service.set_status(device_id, status_value)
        logger.info(f"Device {device_id} set {device.status.value} by {current_user.username}")
        return DeviceResponse.model_validate(device)
    except DeviceNotFoundError as e:
        raise _not_found(e)
    except InvalidDeviceStatusError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConcurrentUpdateError as e:
        raise _conflict(e)
    except Exception as e:
        logger.error(f"Toggle device error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update device status"
        )


@router.put("/{device_id}", response_model=DeviceResponse)
async def update_device(
    device_id: uuid.UUID,
    device_update: DeviceUpdate,
    current_user: AuthUser = Depends(require_permission(DeviceAction.UPDATE)),
    device_service: DeviceService = Depends(get_device_service)
):
    """Update device name and type (OWNER only)"""
    try:
        device = await device_service.update_details(device_id, device_update)
        return DeviceResponse.model_validate(device)
    except DeviceNotFoundError as e:
        raise _not_found(e)
    except ConcurrentUpdateError as e:
        raise _conflict(e)
    except Exception as e:
        logger.error(f"Update device error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update device"
        )


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_device(
    device_id: uuid.UUID,
    current_user: AuthUser = Depends(require_permission(DeviceAction.DELETE)),
    device_service: DeviceService = Depends(get_device_service)
):
    """Delete a device (OWNER only)"""
    try:
        await device_service.delete(device_id)
        logger.info(f"Device {device_id} deleted by {current_user.username}")
    except DeviceNotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(f"Delete device error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete device"
        )
