# ABOUTME: Builds the near-term dog walk forecast from a location request.
# ABOUTME: Resolves the location, samples the hourly series at fixed offsets, and scores each sample.

import logging
import unicodedata
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import httpx

from dogwalk.models import (
    ForecastResponse,
    ForecastSlice,
    HourlySeries,
    LocationRequest,
    LocationSummary,
    ResolvedLocation,
    SuitabilityInputs,
)
from dogwalk.suitability import score_suitability
from dogwalk.weather_service import fetch_hourly_series, geocode, resolve_zone

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = ResolvedLocation(name="Central Park, NYC", latitude=40.7812, longitude=-73.9665)
OFFSETS_MINUTES = (0, 30, 60)
SOURCE = "Open-Meteo.com"


async def build_forecast(
    client: httpx.AsyncClient,
    request: LocationRequest | None = None,
    now: datetime | None = None,
) -> ForecastResponse:
    """Resolve a location and build its scored three-slice forecast.

    Raises ResolutionError or FetchError; no partial response is ever returned.
    """
    location = await resolve_location(client, request or LocationRequest())
    series = await fetch_hourly_series(client, location.latitude, location.longitude)
    slices = build_timeline(series, now)

    return ForecastResponse(
        location=LocationSummary(
            name=location.name,
            latitude=location.latitude,
            longitude=location.longitude,
            timezone=series.timezone,
        ),
        generated_at=datetime.now(timezone.utc),
        slices=slices,
        source=SOURCE,
    )


async def resolve_location(client: httpx.AsyncClient, request: LocationRequest) -> ResolvedLocation:
    """Resolve a request to a named coordinate pair, geocoding only when needed."""
    query = (request.location_query or "").strip()

    if request.latitude is not None and request.longitude is not None:
        return ResolvedLocation(
            name=query or DEFAULT_LOCATION.name,
            latitude=request.latitude,
            longitude=request.longitude,
        )

    if query and _fold(query) == _fold(DEFAULT_LOCATION.name):
        return DEFAULT_LOCATION

    if query:
        location = await geocode(client, query)
        logger.info("Resolved %r to %s (%.4f, %.4f)", query, location.name, location.latitude, location.longitude)
        return location

    return DEFAULT_LOCATION


def _fold(text: str) -> str:
    """Normalize text for case- and accent-insensitive comparison."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def build_timeline(series: HourlySeries, now: datetime | None = None) -> list[ForecastSlice]:
    """Sample and score the series at each forward offset from a single 'now'."""
    now = now or datetime.now(timezone.utc)
    zone = resolve_zone(series.timezone, series.utc_offset_seconds)

    slices = []
    for offset in OFFSETS_MINUTES:
        target = now + timedelta(minutes=offset)
        parameters = SuitabilityInputs(
            temperature_c=sample_series(series.time, series.temperature_2m, target),
            apparent_temperature_c=sample_series(series.time, series.apparent_temperature, target),
            precipitation_mm=sample_series(series.time, series.precipitation, target),
            precipitation_probability=sample_series(series.time, series.precipitation_probability, target),
            wind_speed_kph=sample_series(series.time, series.wind_speed_10m, target),
        )
        slices.append(
            ForecastSlice(
                iso_time=target.astimezone(timezone.utc),
                local_time_label=format_local_label(target, zone),
                parameters=parameters,
                suitability=score_suitability(parameters),
            )
        )
    return slices


def sample_series(timestamps: Sequence[datetime], values: Sequence[float], target: datetime) -> float:
    """Linearly interpolate values at target, clamping to the series' ends."""
    if not timestamps:
        return values[0] if values else 0.0

    if target <= timestamps[0]:
        return values[0]

    for i in range(len(timestamps) - 1):
        start, end = timestamps[i], timestamps[i + 1]
        if start <= target <= end:
            if end == start:
                return values[i]
            ratio = (target - start) / (end - start)
            return values[i] + (values[i + 1] - values[i]) * ratio

    return values[-1]


def format_local_label(instant: datetime, zone) -> str:
    """Format an instant as en-US wall-clock time, e.g. '3:05 PM'."""
    local = instant.astimezone(zone)
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local.hour % 12 or 12}:{local.minute:02d} {meridiem}"
