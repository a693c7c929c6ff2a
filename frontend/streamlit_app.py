"""A Streamlit frontend rendering the Weather Map screen from the API."""

import requests
import streamlit as st

# --- Page and API Configuration ---
st.set_page_config(page_title="Weather Map", page_icon="🗺️", layout="wide")
API_BASE = "http://localhost:8000"
DETAIL_ORDER = [
    ("Place", "place", ""),
    ("Latitude", "latitude", ""),
    ("Longitude", "longitude", ""),
    ("Temp", "temperature_c", "°C"),
    ("Pressure", "pressure", ""),
    ("Humidity", "humidity", "%"),
    ("Description", "description", ""),
]


def get_api_session():
    """Gets the requests.Session object from streamlit's session state."""
    if "api_session" not in st.session_state:
        st.session_state.api_session = requests.Session()
    return st.session_state.api_session


def call_api(method: str, path: str, **kwargs):
    """Calls the API and returns the JSON body, or None after showing the error."""
    try:
        response = get_api_session().request(
            method, f"{API_BASE}{path}", timeout=30, **kwargs
        )
    except requests.exceptions.ConnectionError:
        st.error(
            "Could not connect to the API. Please ensure the backend server is running.",
            icon="🚨",
        )
        st.stop()

    if response.status_code != 200:
        st.error(f"Error: {response.status_code} - {response.text}")
        return None
    return response.json()


def render_map(region):
    """Map centred on the region with a marker at the device position."""
    # Zoom roughly matching the region's latitude span
    zoom = 12 if region["latitude_delta"] <= 0.1 else 9
    st.map(
        {"lat": [region["latitude"]], "lon": [region["longitude"]]},
        latitude="lat",
        longitude="lon",
        zoom=zoom,
        size=40,
        color="#1E88E5",
    )


def render_weather_dialog(weather):
    """Weather Details, shown while the dialog flag is set."""
    with st.container(border=True):
        st.subheader("Weather Details")
        if weather:
            for label, key, suffix in DETAIL_ORDER:
                st.markdown(f"**{label}:** {weather[key]}{suffix}")
        if st.button("Close"):
            call_api("POST", "/screen/dialog/close")
            st.rerun()


# --- Main App ---
st.title("🗺️ Weather Map")

# --- Device location service (stands in for the phone's GPS) ---
with st.sidebar:
    st.header("📍 Device")
    allow_col, deny_col = st.columns(2)
    if allow_col.button("Allow location", use_container_width=True):
        call_api("POST", "/location/permission", json={"granted": True})
    if deny_col.button("Deny location", use_container_width=True):
        call_api("POST", "/location/permission", json={"granted": False})

    st.subheader("Report position")
    lat = st.number_input("Latitude", value=57.5389, format="%.6f")
    lon = st.number_input("Longitude", value=25.425727, format="%.6f")
    if st.button("Send fix", use_container_width=True):
        result = call_api(
            "POST", "/location/fix", json={"latitude": lat, "longitude": lon}
        )
        if result is not None and not result["delivered"]:
            st.info("Fix filtered out (less than 5 s and 10 m since the last one).")

    if st.button("Stop tracking", use_container_width=True):
        call_api("POST", "/location/tracking/stop")

    st.button("Refresh", use_container_width=True)

screen = call_api("GET", "/screen")
if screen is None:
    st.stop()

# --- Alerts ---
for alert in screen["alerts"]:
    st.toast(f"{alert['title']}: {alert['message']}", icon="⚠️")

map_col, detail_col = st.columns([3, 1])

with map_col:
    render_map(screen["region"])

with detail_col:
    if st.button("Show Weather", icon="🗺️", type="primary", use_container_width=True):
        screen = call_api("POST", "/screen/weather") or screen
        for alert in screen["alerts"]:
            st.error(f"{alert['title']}: {alert['message']}")

    if screen["dialog_visible"]:
        render_weather_dialog(screen["weather"])

# --- Location error banner ---
if screen["location_error"]:
    st.markdown(
        f"<p style='color:red;text-align:center'>{screen['location_error']}</p>",
        unsafe_allow_html=True,
    )
