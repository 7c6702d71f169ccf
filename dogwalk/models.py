# ABOUTME: Pydantic BaseModels for location requests, hourly series, and forecast slices.
# ABOUTME: Models are frozen and serialize to the camelCase JSON shape consumed by the UI.

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

METRIC_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "precipitation",
    "precipitation_probability",
    "wind_speed_10m",
)


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class LocationRequest(_Model):
    """Caller-supplied location: free-text query and/or explicit coordinates."""

    location_query: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class ResolvedLocation(_Model):
    """Location with a display name and coordinates, resolved once per request."""

    name: str
    latitude: float
    longitude: float


class LocationSummary(ResolvedLocation):
    """Resolved location plus the timezone reported by the forecast provider."""

    timezone: str


class HourlySeries(_Model):
    """Parallel hourly metric columns sharing one ascending timestamp axis."""

    timezone: str
    utc_offset_seconds: int = 0
    time: list[datetime] = []
    temperature_2m: list[float] = []
    apparent_temperature: list[float] = []
    precipitation: list[float] = []
    precipitation_probability: list[float] = []
    wind_speed_10m: list[float] = []

    @model_validator(mode="after")
    def _check_alignment(self) -> "HourlySeries":
        for name in METRIC_FIELDS:
            if len(getattr(self, name)) != len(self.time):
                raise ValueError(f"{name} has {len(getattr(self, name))} values for {len(self.time)} timestamps")
        return self


class SuitabilityInputs(_Model):
    """Weather parameters at one sampled instant."""

    temperature_c: float
    apparent_temperature_c: float
    precipitation_mm: float
    precipitation_probability: float
    wind_speed_kph: float


class Badge(str, Enum):
    POOR = "Poor"
    FAIR = "Fair"
    PRIME = "Prime"


class SuitabilityResult(_Model):
    score: int
    badge: Badge
    summary: str
    factors: list[str] = []


class ForecastSlice(_Model):
    """One forecast sample at a forward offset from now."""

    iso_time: datetime
    local_time_label: str
    parameters: SuitabilityInputs
    suitability: SuitabilityResult


class ForecastResponse(_Model):
    location: LocationSummary
    generated_at: datetime
    slices: list[ForecastSlice]
    source: str = "Open-Meteo.com"
