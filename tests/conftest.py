# ABOUTME: Shared test fixtures for the dogwalk test suite.
# ABOUTME: Provides a canned Open-Meteo hourly payload.

import pytest


@pytest.fixture
def hourly_payload() -> dict:
    """Three hours of UTC forecast data around 2025-01-15 12:00."""
    return {
        "latitude": 40.78,
        "longitude": -73.97,
        "timezone": "UTC",
        "utc_offset_seconds": 0,
        "hourly": {
            "time": ["2025-01-15T12:00", "2025-01-15T13:00", "2025-01-15T14:00"],
            "temperature_2m": [18.0, 20.0, 22.0],
            "apparent_temperature": [18.0, 20.0, 22.0],
            "precipitation": [0.0, 0.0, 0.0],
            "precipitation_probability": [10.0, 20.0, 30.0],
            "wind_speed_10m": [10.0, 12.0, 14.0],
        },
    }
