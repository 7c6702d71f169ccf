# ABOUTME: Exception hierarchy for forecast building and email delivery failures.
# ABOUTME: Upstream httpx errors are chained onto these so callers see one taxonomy.


class DogwalkError(Exception):
    """Base class for all dogwalk errors."""


class ForecastError(DogwalkError):
    """A forecast request failed as a whole; no partial result exists."""


class ResolutionError(ForecastError):
    """Location lookup failed, was unreachable, or matched nothing."""


class FetchError(ForecastError):
    """Forecast provider was unreachable or returned a non-success status."""


class DeliveryError(DogwalkError):
    """Email provider rejected the message or could not be reached."""
