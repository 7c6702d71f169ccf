# ABOUTME: Service layer for Open-Meteo API calls and response parsing.
# ABOUTME: Handles geocoding and hourly forecast retrieval, localizing the timestamp axis.

from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from pydantic import ValidationError

from dogwalk.errors import FetchError, ResolutionError
from dogwalk.models import METRIC_FIELDS, HourlySeries, ResolvedLocation

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

HOURLY_PARAMS = ",".join(METRIC_FIELDS)


async def geocode(client: httpx.AsyncClient, name: str) -> ResolvedLocation:
    """Geocode a place name to its best match using Open-Meteo geocoding API."""
    try:
        resp = await client.get(
            GEOCODING_URL,
            params={"name": name, "count": 1, "language": "en", "format": "json"},
        )
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ResolutionError("Unable to resolve the requested location") from e

    if not isinstance(data, dict):
        raise ResolutionError("Unable to resolve the requested location")

    results = data.get("results")
    if not results:
        raise ResolutionError("No matching location found")

    r = results[0] if isinstance(results, list) else None
    if not isinstance(r, dict):
        raise ResolutionError("Unable to resolve the requested location")
    admin1 = r.get("admin1")
    try:
        return ResolvedLocation(
            name=f"{r['name']}, {admin1}" if admin1 else r["name"],
            latitude=r["latitude"],
            longitude=r["longitude"],
        )
    except (KeyError, ValidationError) as e:
        raise ResolutionError("Unable to resolve the requested location") from e


async def fetch_hourly_series(client: httpx.AsyncClient, latitude: float, longitude: float) -> HourlySeries:
    """Fetch the hourly forecast for a coordinate pair from Open-Meteo forecast API."""
    try:
        resp = await client.get(
            FORECAST_URL,
            params={
                "latitude": latitude,
                "longitude": longitude,
                "hourly": HOURLY_PARAMS,
                "timezone": "auto",
            },
        )
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise FetchError("Unable to fetch forecast data") from e

    try:
        return parse_hourly_series(data)
    except (ValidationError, KeyError, TypeError, ValueError) as e:
        raise FetchError("Unable to fetch forecast data") from e


def parse_hourly_series(data: dict) -> HourlySeries:
    """Parse an Open-Meteo forecast payload into an HourlySeries.

    Open-Meteo reports hourly timestamps as naive local times in the returned
    timezone, so each one is made aware before sampling compares it to now.
    """
    if not isinstance(data, dict) or not isinstance(data.get("hourly"), dict):
        raise ValueError("forecast payload has no hourly object")

    tz_name = data.get("timezone") or "UTC"
    offset = data.get("utc_offset_seconds") or 0
    zone = resolve_zone(tz_name, offset)

    hourly = data["hourly"]
    times = [_localize(datetime.fromisoformat(t), zone) for t in hourly.get("time", [])]
    columns = {name: _column(hourly, name) for name in METRIC_FIELDS}
    return HourlySeries(timezone=tz_name, utc_offset_seconds=offset, time=times, **columns)


def resolve_zone(name: str, utc_offset_seconds: int = 0) -> tzinfo:
    """Return the IANA zone for name, falling back to a fixed UTC offset."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone(timedelta(seconds=utc_offset_seconds))


def _localize(value: datetime, zone: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value


def _column(hourly: dict, key: str) -> list[float]:
    """Read a metric column, treating nulls as 0.0."""
    return [0.0 if v is None else float(v) for v in hourly.get(key) or []]
