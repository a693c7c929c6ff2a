"""FastAPI middleware that pins each client to a screen session via cookie or header."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Optional
import uuid

SESSION_COOKIE_NAME = "weather_map_session_id"
SESSION_HEADER_NAME = "X-Session-ID"


class SessionMiddleware(BaseHTTPMiddleware):
    """Middleware to handle screen session IDs"""

    def __init__(self, app, session_cookie_name: str = SESSION_COOKIE_NAME):
        super().__init__(app)
        self.session_cookie_name = session_cookie_name

    async def dispatch(self, request: Request, call_next):
        """Attaches the session ID to the request and sets the cookie for new clients."""
        session_id = self._get_session_id(request)
        new_session = session_id is None
        if new_session:
            session_id = str(uuid.uuid4())

        request.state.session_id = session_id
        response = await call_next(request)

        if new_session and response.status_code < 400:
            response.set_cookie(
                key=self.session_cookie_name,
                value=session_id,
                max_age=3600 * 24,  # 1 day
                httponly=True,
                samesite="lax",
            )
            response.headers[SESSION_HEADER_NAME] = session_id

        return response

    def _get_session_id(self, request: Request) -> Optional[str]:
        """Cookie first, then the header used by non-browser clients"""
        return request.cookies.get(self.session_cookie_name) or request.headers.get(
            SESSION_HEADER_NAME
        )
