"""JIRA Cloud REST v3 client wrapper."""

from __future__ import annotations

import base64

import httpx

from .config import JiraConfig, LimitsConfig
from .errors import missing_config_error
from .upstream import JsonApiClient

JIRA_ENV_VARS = ("JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN")


class JiraClient(JsonApiClient):
    """JIRA client using basic auth (account email + API token)."""

    error_code = "Jira"

    def __init__(
        self,
        *,
        config: JiraConfig,
        limits: LimitsConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=f"{config.base_url or ''}/rest/api/3", limits=limits, transport=transport)
        self._config = config

    def ensure_configured(self) -> None:
        if not self._config.configured:
            raise missing_config_error("JIRA", JIRA_ENV_VARS)

    async def _headers(self) -> dict[str, str]:
        self.ensure_configured()
        raw = f"{self._config.email}:{self._config.api_token}".encode("utf-8")
        return {
            "Accept": "application/json",
            "Authorization": f"Basic {base64.b64encode(raw).decode('ascii')}",
            "User-Agent": "devhub-mcp",
        }

    def _error_hint(self, payload: object) -> str | None:
        if not isinstance(payload, dict):
            return None
        messages = [m for m in payload.get("errorMessages") or [] if isinstance(m, str)]
        errors = payload.get("errors")
        if isinstance(errors, dict):
            messages.extend(f"{k}: {v}" for k, v in errors.items())
        return "; ".join(messages) or None

    async def search(self, *, jql: str, max_results: int, start_at: int = 0, fields: list[str] | None = None) -> object:
        """Run a JQL search (POST /search)."""
        body: dict[str, object] = {"jql": jql, "maxResults": max_results, "startAt": start_at}
        if fields:
            body["fields"] = fields
        return await self.request_json(method="POST", path="/search", json_body=body)
