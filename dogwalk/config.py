# ABOUTME: Environment-driven settings for email delivery, cron digests, and logging.
# ABOUTME: Loads a .env file via python-dotenv and exposes a frozen Settings model.

import logging
import math
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_SENDER = "Dogwalk Index <dogwalk-index@updates.codex.app>"


class Settings(BaseModel):
    """Runtime configuration read from environment variables."""

    model_config = ConfigDict(frozen=True)

    resend_api_key: str | None = None
    resend_from: str = DEFAULT_SENDER
    email_token: str | None = None
    cron_email: str | None = None
    cron_location: str | None = None
    cron_latitude: float | None = None
    cron_longitude: float | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            resend_api_key=os.environ.get("RESEND_API_KEY") or None,
            resend_from=os.environ.get("RESEND_FROM") or DEFAULT_SENDER,
            email_token=os.environ.get("DOGWALK_EMAIL_TOKEN") or None,
            cron_email=os.environ.get("DOGWALK_CRON_EMAIL") or None,
            cron_location=os.environ.get("DOGWALK_CRON_LOCATION") or None,
            cron_latitude=parse_optional_float(os.environ.get("DOGWALK_CRON_LATITUDE")),
            cron_longitude=parse_optional_float(os.environ.get("DOGWALK_CRON_LONGITUDE")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )


def parse_optional_float(value: str | None) -> float | None:
    """Parse a finite float, returning None for empty or unparseable input."""
    if not value:
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
