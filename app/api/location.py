"""Endpoints through which the device feeds its location service"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from app.api.session import current_session
from app.core.location_provider import DeviceLocationProvider
from app.core.screen import ScreenSession
from app.models.location import FixAcceptedResponse, LocationFix, PermissionRequest
from app.models.screen import ScreenState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/location", tags=["location"])


def _device_provider(session: ScreenSession) -> DeviceLocationProvider:
    if not isinstance(session.provider, DeviceLocationProvider):
        raise HTTPException(
            status_code=409, detail="Session is not fed by a device location service"
        )
    return session.provider


@router.post("/permission", response_model=ScreenState)
async def report_permission(
    permission: PermissionRequest, session: ScreenSession = Depends(current_session)
):
    """Record the device's permission answer and (re)start tracking"""
    _device_provider(session).set_permission(permission.granted)
    await session.start_tracking()
    return session.state()


@router.post("/fix", response_model=FixAcceptedResponse)
async def report_fix(fix: LocationFix, session: ScreenSession = Depends(current_session)):
    """Report a raw position fix; it reaches the screen only if the watch filter lets it through"""
    try:
        delivered = _device_provider(session).report_fix(fix)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error handling position fix: {e}")
        raise HTTPException(status_code=500, detail=f"Error handling position fix: {str(e)}")

    return FixAcceptedResponse(delivered=delivered, coordinates=session.coordinates)


@router.post("/tracking/stop", response_model=ScreenState)
async def stop_tracking(session: ScreenSession = Depends(current_session)):
    """Release the position watch"""
    session.stop_tracking()
    return session.state()
