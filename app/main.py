"""Main FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.config import settings
from app.core.session_manager import session_manager
from app.middleware.session import SessionMiddleware
import logging

from app.api.screen import router as screen_router
from app.api.location import router as location_router
from app.api.session import router as session_router

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manages application startup and shutdown events."""
    logger.info("Starting Weather Map API")
    if not session_manager.weather_client.has_valid_key:
        logger.warning("OPENWEATHER_API_KEY is not set; weather requests will be refused")

    await session_manager.start()

    yield

    # Tearing sessions down releases every live position watch
    logger.info("Shutting down Weather Map API")
    await session_manager.stop()


app = FastAPI(
    title="Weather Map API",
    description="Map centered on the device position with current weather on demand",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(screen_router)
app.include_router(location_router)
app.include_router(session_router)


@app.get("/")
async def root():
    """Provides basic information about the running API."""
    return {
        "message": "Weather Map API",
        "status": "running",
        "features": {
            "weather": session_manager.weather_client.has_valid_key,
        },
    }


@app.get("/health")
async def health_check():
    """Performs a health check of the API."""
    return {
        "status": "healthy",
        "active_sessions": session_manager.active_sessions,
    }


@app.get("/sessions")
async def get_sessions():
    """(Admin) Gets information about all live screen sessions."""
    return session_manager.get_session_info()
