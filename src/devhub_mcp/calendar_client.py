"""Google Calendar v3 client wrapper.

Access tokens are obtained with the OAuth refresh-token grant and cached until shortly
before they expire. Secrets (client secret, refresh token, access token) must never be
exposed.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from .config import GoogleCalendarConfig, LimitsConfig
from .errors import SafeError, missing_config_error
from .upstream import JsonApiClient

CALENDAR_API_BASE_URL = "https://www.googleapis.com/calendar/v3"
OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_ENV_VARS = ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REFRESH_TOKEN")

# Refresh this many seconds before the upstream expiry.
EXPIRY_MARGIN_S = 300


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Cached access token + monotonic expiry."""

    token: str
    expires_at: float


class _TokenEndpoint(JsonApiClient):
    error_code = "GoogleCalendar"

    def _error_hint(self, payload: object) -> str | None:
        if isinstance(payload, dict):
            desc = payload.get("error_description") or payload.get("error")
            if isinstance(desc, str):
                return desc
        return None


class GoogleCalendarClient(JsonApiClient):
    """Calendar client for a single OAuth user."""

    error_code = "GoogleCalendar"

    def __init__(
        self,
        *,
        config: GoogleCalendarConfig,
        limits: LimitsConfig,
        base_url: str = CALENDAR_API_BASE_URL,
        token_url: str = OAUTH_TOKEN_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, limits=limits, transport=transport)
        self._config = config
        self._token_url = token_url
        self._token_endpoint = _TokenEndpoint(base_url=token_url, limits=limits, transport=transport)
        self._lock = asyncio.Lock()
        self._cached: AccessToken | None = None

    async def get_access_token(self) -> str:
        """Get a valid access token (refreshing if needed)."""
        if not self._config.configured:
            raise missing_config_error("Google Calendar", GOOGLE_ENV_VARS)

        async with self._lock:
            if self._cached is not None and self._cached.expires_at > time.monotonic():
                return self._cached.token

            data = await self._token_endpoint.request_json(
                method="POST",
                path="",
                url=self._token_url,
                form={
                    "client_id": self._config.client_id or "",
                    "client_secret": self._config.client_secret or "",
                    "refresh_token": self._config.refresh_token or "",
                    "grant_type": "refresh_token",
                },
            )
            if not isinstance(data, dict) or not isinstance(data.get("access_token"), str):
                raise SafeError(code="GoogleCalendar", message="Token response missing access_token")

            expires_in = data.get("expires_in")
            if not isinstance(expires_in, (int, float)) or isinstance(expires_in, bool):
                expires_in = 3600
            self._cached = AccessToken(
                token=data["access_token"],
                expires_at=time.monotonic() + expires_in - EXPIRY_MARGIN_S,
            )
            return self._cached.token

    async def _headers(self) -> dict[str, str]:
        token = await self.get_access_token()
        return {"Authorization": f"Bearer {token}", "Accept": "application/json"}

    def _error_hint(self, payload: object) -> str | None:
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
        return None

    async def list_events(
        self,
        *,
        calendar_id: str = "primary",
        time_min: str | None = None,
        time_max: str | None = None,
        max_results: int = 10,
        q: str | None = None,
        single_events: bool = True,
        order_by: str | None = "startTime",
    ) -> Any:
        params: dict[str, str] = {}
        if time_min:
            params["timeMin"] = time_min
        if time_max:
            params["timeMax"] = time_max
        if max_results:
            params["maxResults"] = str(max_results)
        if q:
            params["q"] = q
        if single_events:
            params["singleEvents"] = "true"
        if order_by:
            params["orderBy"] = order_by
        return await self.request_json(
            method="GET",
            path=f"/calendars/{quote(calendar_id, safe='')}/events",
            params=params,
        )

    async def create_event(self, *, event: dict[str, Any], calendar_id: str = "primary") -> Any:
        return await self.request_json(
            method="POST",
            path=f"/calendars/{quote(calendar_id, safe='')}/events",
            json_body=event,
        )
