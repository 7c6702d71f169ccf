# ABOUTME: Contract tests for the email digest renderer and Resend delivery.
# ABOUTME: Builds forecasts from canned data and mocks the Resend POST.

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import httpx
import pytest

from dogwalk.config import Settings
from dogwalk.digest import RESEND_URL, best_slice, format_temp, format_wind, render_email_html, send_forecast_email
from dogwalk.errors import DeliveryError
from dogwalk.forecast import build_timeline
from dogwalk.models import ForecastResponse, LocationSummary
from dogwalk.weather_service import parse_hourly_series

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def forecast(hourly_payload) -> ForecastResponse:
    hourly_payload["hourly"]["precipitation"] = [2.0, 0.0, 0.0]
    return ForecastResponse(
        location=LocationSummary(name="Austin & Co", latitude=30.27, longitude=-97.74, timezone="UTC"),
        generated_at=NOW,
        slices=build_timeline(parse_hourly_series(hourly_payload), now=NOW),
    )


def _response(json_data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=json_data, request=httpx.Request("GET", "https://test"))


def _post_client(response) -> httpx.AsyncClient:
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.post.side_effect = [response]
    return mock


class TestRenderEmailHtml:
    def test_contains_cards_and_best_window(self, forecast):
        """The digest renders one card per slice and names the best window.

        Implementation: Renders a forecast where rain spoils the first slice.
        Passing implies: Readers see every slice and the highest-scoring time.
        """
        html = render_email_html(forecast)

        assert html.count("<section") == 3
        assert "12:00 PM · now" in html
        assert "Best window: 1:00 PM (Great window for a walk)" in html
        assert "Steady rain expected" in html
        assert "Nothing notable" in html
        assert "Jan 15, 2025, 12:00 PM UTC" in html

    def test_escapes_location_name(self, forecast):
        assert "Austin &amp; Co" in render_email_html(forecast)

    def test_markup_in_location_name_is_escaped(self, forecast):
        """Location names are rendered as text through the autoescaping template.

        Implementation: Renders a forecast whose location name carries HTML tags.
        Passing implies: Geocoder or caller supplied names cannot inject markup into the email.
        """
        hostile = forecast.model_copy(
            update={"location": LocationSummary(name="<b>Park</b>", latitude=0, longitude=0, timezone="UTC")}
        )
        html = render_email_html(hostile)

        assert "&lt;b&gt;Park&lt;/b&gt;" in html
        assert "<b>Park</b>" not in html

    def test_best_slice_prefers_earliest_on_tie(self, hourly_payload):
        slices = build_timeline(parse_hourly_series(hourly_payload), now=NOW)
        forecast = ForecastResponse(
            location=LocationSummary(name="X", latitude=0, longitude=0, timezone="UTC"),
            generated_at=NOW,
            slices=slices,
        )
        assert best_slice(forecast) is forecast.slices[0]

    def test_unit_formatting(self):
        assert format_temp(20.0) == "68°F (20°C)"
        assert format_wind(16.0934) == "10 mph"


class TestSendForecastEmail:
    @pytest.mark.asyncio
    async def test_posts_to_resend(self, forecast):
        """send_forecast_email posts the rendered digest with bearer auth.

        Implementation: Inspects the mock client's POST call args.
        Passing implies: Resend receives sender, recipient, subject, and HTML.
        """
        client = _post_client(_response({"id": "abc"}))
        settings = Settings(resend_api_key="re_test")

        await send_forecast_email(client, settings, "owner@example.com", forecast)

        call = client.post.call_args
        assert call.args[0] == RESEND_URL
        assert call.kwargs["headers"]["Authorization"] == "Bearer re_test"
        body = call.kwargs["json"]
        assert body["to"] == "owner@example.com"
        assert body["subject"] == "Dogwalk suitability in Austin & Co"
        assert body["from"] == settings.resend_from
        assert "<section" in body["html"]

    @pytest.mark.asyncio
    async def test_missing_api_key(self, forecast):
        client = _post_client(_response({}))
        with pytest.raises(DeliveryError, match="Missing RESEND_API_KEY"):
            await send_forecast_email(client, Settings(), "owner@example.com", forecast)
        client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_provider_error_message_is_surfaced(self, forecast):
        client = _post_client(_response({"message": "domain not verified"}, status_code=403))
        with pytest.raises(DeliveryError, match="domain not verified"):
            await send_forecast_email(client, Settings(resend_api_key="k"), "owner@example.com", forecast)

    @pytest.mark.asyncio
    async def test_transport_error(self, forecast):
        client = _post_client(httpx.ConnectError("down"))
        with pytest.raises(DeliveryError, match="Resend API error"):
            await send_forecast_email(client, Settings(resend_api_key="k"), "owner@example.com", forecast)
