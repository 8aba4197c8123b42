"""Shared httpx request wrapper for upstream REST APIs.

Provides:
- finite timeouts on every request
- no redirects, no retries
- safe error translation into SafeError
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .config import LimitsConfig
from .errors import SafeError

logger = logging.getLogger(__name__)

_HINT_MAX_CHARS = 500


class JsonApiClient:
    """Base class for a JSON REST API.

    Subclasses set ``error_code`` and implement ``_headers``; they may override
    ``_error_hint`` to pull the upstream's own error message out of a failure body.
    """

    error_code = "Network"

    def __init__(
        self,
        *,
        base_url: str,
        limits: LimitsConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._limits = limits
        self._transport = transport

    async def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def _error_hint(self, payload: object) -> str | None:
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return payload["message"]
        return None

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self._limits.http_timeout_s, connect=self._limits.connect_timeout_s)

    def _hint_from_response(self, resp: httpx.Response) -> str | None:
        try:
            hint = self._error_hint(resp.json())
        except ValueError:
            hint = None
        if hint is None and resp.text:
            hint = resp.text
        if hint is not None and len(hint) > _HINT_MAX_CHARS:
            hint = hint[:_HINT_MAX_CHARS] + "..."
        return hint

    async def request_json(
        self,
        *,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: object | None = None,
        form: dict[str, str] | None = None,
        url: str | None = None,
    ) -> Any:
        """Make a request and return decoded JSON.

        ``url`` overrides ``base_url + path`` for endpoints on a different host.

        Raises:
            SafeError: On HTTP error status, transport failure, timeout or invalid JSON.
        """
        target = url or f"{self._base_url}{path}"
        headers = await self._headers()

        try:
            async with httpx.AsyncClient(
                follow_redirects=False,
                timeout=self._timeout(),
                transport=self._transport,
            ) as client:
                resp = await client.request(
                    method,
                    target,
                    headers=headers,
                    params=params,
                    json=json_body,
                    data=form,
                )
        except httpx.TimeoutException as exc:
            raise SafeError(code="Timeout", message=f"{method} {path or target} timed out") from exc
        except httpx.HTTPError as exc:
            raise SafeError(code="Network", message="Network request failed") from exc

        if resp.status_code >= 400:
            logger.debug("%s %s -> %s", method, path or target, resp.status_code)
            raise SafeError(
                code=self.error_code,
                message=resp.reason_phrase or "Request failed",
                hint=self._hint_from_response(resp),
                status_code=resp.status_code,
            )

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except json.JSONDecodeError as exc:
            raise SafeError(code=self.error_code, message="Upstream returned invalid JSON") from exc
