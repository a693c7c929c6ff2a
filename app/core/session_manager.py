"""Session management for per-client map screens"""

import asyncio
import uuid
from typing import Dict, Optional, Any, List
from app.config import settings
from app.core.location_provider import DeviceLocationProvider
from app.core.screen import ScreenSession
from app.core.weather_api import OpenWeatherClient
import logging

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages screen sessions for clients"""

    _instance: Optional["SessionManager"] = None

    def __new__(cls):
        """Implements the singleton pattern for the SessionManager."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initializes the session manager's state."""
        if not hasattr(self, "_initialized"):
            self._initialized = True
            self._sessions: Dict[str, ScreenSession] = {}
            self._lock = asyncio.Lock()
            self._cleanup_task: Optional[asyncio.Task] = None
            self.weather_client = OpenWeatherClient()
            self.session_timeout_minutes = settings.session_timeout_minutes
            self.idle_timeout_minutes = settings.idle_timeout_minutes

    async def start(self):
        """Start session manager and cleanup task"""
        if not self._cleanup_task:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Session manager started")

    async def stop(self):
        """Stop session manager and tear down all sessions"""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

        async with self._lock:
            for session in self._sessions.values():
                await self._close(session)
            self._sessions.clear()

        logger.info("Session manager stopped")

    async def get_or_create_session(
        self, session_id: Optional[str] = None
    ) -> ScreenSession:
        """Get existing session or create new one"""
        async with self._lock:
            if not session_id:
                session_id = str(uuid.uuid4())

            if session_id in self._sessions:
                session = self._sessions[session_id]
                session.touch()
                return session

            logger.info(f"Creating new screen session {session_id}")
            session = ScreenSession(
                session_id,
                provider=DeviceLocationProvider(),
                weather_client=self.weather_client,
            )
            self._sessions[session_id] = session
            return session

    async def get_session(self, session_id: str) -> Optional[ScreenSession]:
        """Get existing session by ID"""
        async with self._lock:
            session = self._sessions.get(session_id)
            if session:
                session.touch()
            return session

    async def destroy_session(self, session_id: str) -> bool:
        """Tear down a specific session"""
        async with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is None:
            return False

        await self._close(session)
        logger.info(f"Destroyed session {session_id}")
        return True

    async def _close(self, session: ScreenSession):
        try:
            await session.close()
        except Exception as e:
            logger.error(f"Error closing session {session.session_id}: {e}")

    async def _cleanup_loop(self):
        """Background task to clean up expired sessions"""
        while True:
            try:
                await asyncio.sleep(60)  # Check every minute
                await self.cleanup_expired_sessions()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cleanup loop: {e}")

    def _is_expired(self, session: ScreenSession) -> bool:
        if session.idle_minutes > self.idle_timeout_minutes:
            return True
        # A session still watching the position is only ever torn down once idle
        return (
            not session.tracker.active
            and session.age_minutes > self.session_timeout_minutes
        )

    async def cleanup_expired_sessions(self) -> List[str]:
        """Remove idle sessions, and old ones that are no longer tracking"""
        async with self._lock:
            expired = [
                session_id
                for session_id, session in self._sessions.items()
                if self._is_expired(session)
            ]
            sessions = [self._sessions.pop(session_id) for session_id in expired]

        for session in sessions:
            logger.info(f"Cleaning up expired session {session.session_id}")
            await self._close(session)

        return expired

    def get_session_info(self) -> List[Dict[str, Any]]:
        """Summaries of all live sessions"""
        return [
            {
                "session_id": session.session_id,
                "age_minutes": round(session.age_minutes, 2),
                "idle_minutes": round(session.idle_minutes, 2),
                "tracking": session.tracker.active,
            }
            for session in self._sessions.values()
        ]

    @property
    def active_sessions(self) -> int:
        """Get count of active sessions"""
        return len(self._sessions)


# Global session manager instance
session_manager = SessionManager()
