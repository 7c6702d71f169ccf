# ABOUTME: Renders a forecast as an HTML email digest and delivers it through Resend.
# ABOUTME: Delivery failures are raised as DeliveryError with the provider's message.

import logging
import os
from datetime import timezone

import httpx
from jinja2 import Template

from dogwalk.config import Settings
from dogwalk.errors import DeliveryError
from dogwalk.forecast import format_local_label
from dogwalk.models import Badge, ForecastResponse, ForecastSlice

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"

TEMPLATE_PATH = os.path.join(os.path.dirname(__file__), "templates", "digest.html.j2")
with open(TEMPLATE_PATH, encoding="utf-8") as f:
    DIGEST_TEMPLATE = f.read()

BADGE_COLORS = {
    Badge.PRIME: "#0b8457",
    Badge.FAIR: "#c97704",
    Badge.POOR: "#b91c1c",
}


async def send_forecast_email(
    client: httpx.AsyncClient,
    settings: Settings,
    to: str,
    forecast: ForecastResponse,
    subject: str | None = None,
) -> None:
    """Send the forecast digest to a single recipient."""
    if not settings.resend_api_key:
        raise DeliveryError("Missing RESEND_API_KEY")

    try:
        resp = await client.post(
            RESEND_URL,
            headers={"Authorization": f"Bearer {settings.resend_api_key}"},
            json={
                "from": settings.resend_from,
                "to": to,
                "subject": subject or f"Dogwalk suitability in {forecast.location.name}",
                "html": render_email_html(forecast),
            },
        )
    except httpx.HTTPError as e:
        raise DeliveryError(f"Resend API error: {e}") from e

    if resp.is_error:
        raise DeliveryError(f"Resend API error: {resp.text}")
    logger.info("Sent forecast for %s to %s", forecast.location.name, to)


def best_slice(forecast: ForecastResponse) -> ForecastSlice:
    """Return the highest-scoring slice, preferring the earliest on ties."""
    return max(forecast.slices, key=lambda s: s.suitability.score)


def render_email_html(forecast: ForecastResponse) -> str:
    g = forecast.generated_at
    template = Template(DIGEST_TEMPLATE, autoescape=True)
    return template.render(
        forecast=forecast,
        best=best_slice(forecast),
        generated=f"{g:%b} {g.day}, {g.year}, {format_local_label(g, timezone.utc)}",
        badge_colors=BADGE_COLORS,
        format_temp=format_temp,
        format_wind=format_wind,
    )


def format_temp(celsius: float) -> str:
    return f"{celsius * 9 / 5 + 32:.0f}°F ({celsius:.0f}°C)"


def format_wind(kph: float) -> str:
    return f"{kph * 0.621371:.0f} mph"
