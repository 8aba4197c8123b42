"""GitHub REST client wrapper."""

from __future__ import annotations

import httpx

from .config import GitHubConfig, LimitsConfig
from .upstream import JsonApiClient


class GitHubClient(JsonApiClient):
    """Minimal GitHub REST client.

    Authenticates with a static token when one is configured; otherwise requests are
    unauthenticated (public repositories only, lower rate limit).
    """

    error_code = "GitHub"

    def __init__(
        self,
        *,
        config: GitHubConfig,
        limits: LimitsConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=config.api_base_url, limits=limits, transport=transport)
        self._token = config.token

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    async def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "devhub-mcp",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers
