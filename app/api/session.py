"""Session management endpoints"""

from fastapi import APIRouter, Request
from app.core.screen import ScreenSession
from app.core.session_manager import session_manager
from typing import Dict, Any

router = APIRouter(prefix="/session", tags=["session"])


async def current_session(request: Request) -> ScreenSession:
    """Dependency returning the caller's screen session, creating it on first use."""
    session_id = getattr(request.state, "session_id", None)
    return await session_manager.get_or_create_session(session_id)


@router.get("/info")
async def get_session_info(request: Request) -> Dict[str, Any]:
    """Get current session information"""
    session_id = getattr(request.state, "session_id", None)

    if not session_id:
        return {"error": "No session ID found", "session_id": None}

    session = await session_manager.get_session(session_id)

    if session:
        return {
            "session_id": session_id,
            "created_at": session.created_at.isoformat(),
            "age_minutes": round(session.age_minutes, 2),
            "idle_minutes": round(session.idle_minutes, 2),
            "tracking": session.tracker.active,
        }
    else:
        return {"session_id": session_id, "error": "Session not found in manager"}


@router.delete("/")
async def destroy_session(request: Request) -> Dict[str, Any]:
    """Tear down current session, releasing its location watch"""
    session_id = getattr(request.state, "session_id", None)

    if session_id and await session_manager.destroy_session(session_id):
        return {"message": "Session destroyed", "session_id": session_id}
    else:
        return {"error": "No session to destroy"}
