"""Simple API tests."""

import logging

from app.core.session_manager import session_manager
from app.middleware.session import SESSION_HEADER_NAME


def test_root_endpoint(client):
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Weather Map API"
    assert data["status"] == "running"
    assert data["features"]["weather"] is True


def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_screen_starts_at_default_region(client):
    """A new client gets the default map region and a closed dialog."""
    response = client.get("/screen")
    assert response.status_code == 200
    data = response.json()
    assert data["region"]["latitude"] == 57.5389
    assert data["region"]["longitude"] == 25.425727
    assert data["region"]["latitude_delta"] == 0.0922
    assert data["dialog_visible"] is False
    assert data["weather"] is None
    assert data["location_error"] is None
    assert response.headers[SESSION_HEADER_NAME] == data["session_id"]


def test_session_is_sticky(client):
    """The cookie keeps a client on the same screen session."""
    first = client.get("/screen").json()["session_id"]
    second = client.get("/screen").json()["session_id"]
    assert first == second


def test_show_weather_and_close(client):
    """Show Weather opens the dialog with the fetched record; Close hides it."""
    response = client.post("/screen/weather")
    assert response.status_code == 200
    data = response.json()
    assert data["dialog_visible"] is True
    assert data["weather"] == {
        "place": "Valka",
        "latitude": "57.5389",
        "longitude": "25.4257",
        "temperature_c": "18.46",
        "pressure": 1012,
        "humidity": 60,
        "description": "clear sky",
    }

    data = client.post("/screen/dialog/close").json()
    assert data["dialog_visible"] is False
    assert data["weather"]["place"] == "Valka"


def test_weather_api_error_is_not_alerted(client, weather_api, caplog):
    """A 401 from the weather service leaves the dialog empty, raises no alert and is logged."""
    weather_api.respond(status_code=401, text="Invalid API key")

    with caplog.at_level(logging.ERROR, logger="app.core.screen"):
        data = client.post("/screen/weather").json()

    assert any(
        r.name == "app.core.screen" and "status: 401" in r.getMessage()
        for r in caplog.records
    )

    assert data["dialog_visible"] is True
    assert data["weather"] is None
    assert data["alerts"] == []


def test_missing_api_key_alerts(client, weather_api):
    """A placeholder key produces one API Error alert and no request."""
    session_manager.weather_client = weather_api.client(api_key="Your API key")

    data = client.post("/screen/weather").json()

    assert [a["title"] for a in data["alerts"]] == ["API Error"]
    assert weather_api.requests == []
    assert client.get("/screen/alerts").json() == {"alerts": []}


def test_permission_denied_shows_banner(client):
    data = client.post("/location/permission", json={"granted": False}).json()

    assert data["location_error"] == "Permission to access location was denied"
    assert data["tracking"] is False
    assert client.get("/screen").json()["location_error"] is not None


def test_fix_moves_map_after_permission(client):
    client.post("/location/permission", json={"granted": True})

    response = client.post("/location/fix", json={"latitude": 56.95, "longitude": 24.1})
    assert response.status_code == 200
    assert response.json()["delivered"] is True

    data = client.get("/screen").json()
    assert data["tracking"] is True
    assert data["location_error"] is None
    assert (data["region"]["latitude"], data["region"]["longitude"]) == (56.95, 24.1)


def test_fix_without_tracking_is_dropped(client):
    response = client.post("/location/fix", json={"latitude": 1, "longitude": 1})
    assert response.json()["delivered"] is False
    assert client.get("/screen").json()["region"]["latitude"] == 57.5389


def test_invalid_fix_is_rejected(client):
    response = client.post("/location/fix", json={"latitude": 123, "longitude": 1})
    assert response.status_code == 422


def test_stop_tracking(client):
    client.post("/location/permission", json={"granted": True})
    data = client.post("/location/tracking/stop").json()
    assert data["tracking"] is False


def test_destroy_session_releases_watch(client):
    session_id = client.get("/screen").json()["session_id"]
    client.post("/location/permission", json={"granted": True})

    response = client.delete("/session/")
    assert response.json()["session_id"] == session_id
    assert session_id not in [s["session_id"] for s in client.get("/sessions").json()]


def test_invalid_endpoint(client):
    """Test calling an invalid endpoint."""
    response = client.get("/invalid")
    assert response.status_code == 404
