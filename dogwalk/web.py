# ABOUTME: ASGI web entry point exposing the forecast JSON and email digest routes.
# ABOUTME: Creates a Starlette app whose handlers share one httpx client and Settings.

import logging
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from dogwalk.config import Settings, configure_logging, parse_optional_float
from dogwalk.deps import DogwalkDeps, create_http_client
from dogwalk.digest import send_forecast_email
from dogwalk.errors import DogwalkError, ForecastError
from dogwalk.forecast import build_forecast
from dogwalk.models import LocationRequest

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def forecast_endpoint(request: Request) -> JSONResponse:
    """GET /api/forecast?location=&lat=&lon= returns the scored forecast."""
    deps: DogwalkDeps = request.app.state.deps
    params = request.query_params
    location_request = LocationRequest(
        location_query=params.get("location") or None,
        latitude=parse_optional_float(params.get("lat")),
        longitude=parse_optional_float(params.get("lon")),
    )
    try:
        forecast = await build_forecast(deps.http_client, location_request)
    except ForecastError as e:
        logger.warning("Forecast request failed: %s", e)
        return _error(str(e), 400)
    except Exception:
        logger.exception("Unexpected failure preparing forecast")
        return _error("Unable to prepare forecast", 400)
    return JSONResponse(forecast.model_dump(mode="json", by_alias=True))


async def email_endpoint(request: Request) -> JSONResponse:
    """POST /api/email sends the forecast digest to the address in the body."""
    deps: DogwalkDeps = request.app.state.deps
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict) or not isinstance(payload.get("email"), str):
        return _error("An email address is required", 400)

    if not is_authorized(request, payload.get("token"), deps.settings.email_token):
        return _error("Missing or invalid access token", 401)

    location_request = LocationRequest(
        location_query=_typed(payload.get("location"), str),
        latitude=_typed(payload.get("latitude"), (int, float)),
        longitude=_typed(payload.get("longitude"), (int, float)),
    )
    try:
        forecast = await build_forecast(deps.http_client, location_request)
        await send_forecast_email(deps.http_client, deps.settings, payload["email"], forecast)
    except DogwalkError as e:
        logger.warning("Email request failed: %s", e)
        return _error(str(e), 500)
    except Exception:
        logger.exception("Unexpected failure sending email")
        return _error("Unable to send email", 500)
    return JSONResponse({"ok": True})


async def cron_email_endpoint(request: Request) -> JSONResponse:
    """GET /api/cron-email sends the digest for the configured cron location."""
    deps: DogwalkDeps = request.app.state.deps
    settings = deps.settings
    if not settings.cron_email:
        return _error("DOGWALK_CRON_EMAIL environment variable is missing", 500)

    location_request = LocationRequest(
        location_query=settings.cron_location,
        latitude=settings.cron_latitude,
        longitude=settings.cron_longitude,
    )
    try:
        forecast = await build_forecast(deps.http_client, location_request)
        await send_forecast_email(deps.http_client, settings, settings.cron_email, forecast)
    except DogwalkError as e:
        logger.warning("Cron email failed: %s", e)
        return _error(str(e), 500)
    except Exception:
        logger.exception("Unexpected failure sending cron email")
        return _error("Unable to send cron email", 500)
    return JSONResponse({"ok": True})


def is_authorized(request: Request, body_token, required_token: str | None) -> bool:
    """Accept any request when no token is configured, else match header or body token."""
    if not required_token:
        return True
    header = request.headers.get("authorization", "").replace("Bearer", "").strip()
    body = body_token.strip() if isinstance(body_token, str) else None
    return header == required_token or body == required_token


def _typed(value, types):
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, types):
        return None
    return value


def create_app(deps: DogwalkDeps | None = None) -> Starlette:
    deps = deps or DogwalkDeps(http_client=create_http_client(), settings=Settings.from_env())
    configure_logging(deps.settings.log_level)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await deps.http_client.aclose()

    app = Starlette(
        routes=[
            Route("/api/forecast", forecast_endpoint, methods=["GET"]),
            Route("/api/email", email_endpoint, methods=["POST"]),
            Route("/api/cron-email", cron_email_endpoint, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    app.state.deps = deps
    return app


app = create_app()
