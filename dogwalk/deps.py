# ABOUTME: Dependency container shared by the web routes.
# ABOUTME: Holds the httpx.AsyncClient and Settings that service functions are called with.

import httpx
from pydantic import BaseModel, ConfigDict

from dogwalk.config import Settings


class DogwalkDeps(BaseModel):
    """Dependencies injected into request handlers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    settings: Settings


def create_http_client() -> httpx.AsyncClient:
    """Create a plain httpx client.

    Upstream failures surface immediately, so no retry transport is installed
    and httpx's default timeout applies.
    """
    return httpx.AsyncClient(headers={"user-agent": "dogwalk-index"})
