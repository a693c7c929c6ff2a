"""Map screen endpoints: state, the Show Weather action and the dialog"""

from fastapi import APIRouter, Depends
from app.api.session import current_session
from app.core.screen import ScreenSession
from app.models.screen import AlertsResponse, ScreenState

router = APIRouter(prefix="/screen", tags=["screen"])


@router.get("", response_model=ScreenState)
async def get_screen(session: ScreenSession = Depends(current_session)):
    """Current map region, weather record, dialog flag and error banner"""
    return session.state()


@router.post("/weather", response_model=ScreenState)
async def show_weather(session: ScreenSession = Depends(current_session)):
    """Fetch weather for the current position and open the dialog"""
    await session.show_weather()
    return session.state()


@router.post("/dialog/close", response_model=ScreenState)
async def close_dialog(session: ScreenSession = Depends(current_session)):
    """Dismiss the weather dialog"""
    session.hide_dialog()
    return session.state()


@router.get("/alerts", response_model=AlertsResponse)
async def get_alerts(session: ScreenSession = Depends(current_session)):
    """Drain alerts waiting to be shown"""
    return AlertsResponse(alerts=session.pop_alerts())
