"""Shared fixtures: a scripted location service and a stubbed OpenWeather endpoint."""

import pytest
from fastapi.testclient import TestClient

from app.core.session_manager import session_manager
from app.main import app
from fakes import FakeProvider, WeatherAPIStub


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def weather_api():
    return WeatherAPIStub()


@pytest.fixture
def client(weather_api):
    """API client whose sessions talk to the stubbed weather endpoint."""
    original = session_manager.weather_client
    session_manager.weather_client = weather_api.client()
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        session_manager.weather_client = original
