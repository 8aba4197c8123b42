"""Slack Web API client wrapper.

Slack reports most failures as HTTP 200 with ``{"ok": false, "error": "..."}``; those are
translated into SafeError like any HTTP failure.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import LimitsConfig, SlackConfig
from .errors import SafeError, missing_config_error
from .upstream import JsonApiClient

logger = logging.getLogger(__name__)

SLACK_API_BASE_URL = "https://slack.com/api"
SLACK_ENV_VARS = ("SLACK_BOT_TOKEN",)

MAX_CHANNEL_PAGE = 200
MAX_MESSAGE_PAGE = 100


class SlackClient(JsonApiClient):
    """Slack bot-token client."""

    error_code = "Slack"

    def __init__(
        self,
        *,
        config: SlackConfig,
        limits: LimitsConfig,
        base_url: str = SLACK_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=base_url, limits=limits, transport=transport)
        self._config = config

    async def _headers(self) -> dict[str, str]:
        if not self._config.configured:
            raise missing_config_error("Slack", SLACK_ENV_VARS)
        return {
            "Authorization": f"Bearer {self._config.bot_token}",
            "Content-Type": "application/json; charset=utf-8",
        }

    def _error_hint(self, payload: object) -> str | None:
        if isinstance(payload, dict) and isinstance(payload.get("error"), str):
            return payload["error"]
        return None

    async def call(self, method: str, *, params: dict[str, Any] | None = None, json_body: object | None = None) -> dict[str, Any]:
        """Call a Web API method and return the payload when ``ok`` is true."""
        data = await self.request_json(
            method="POST" if json_body is not None else "GET",
            path=f"/{method}",
            params=params,
            json_body=json_body,
        )
        if not isinstance(data, dict):
            raise SafeError(code="Slack", message=f"Unexpected {method} response")
        if data.get("ok") is not True:
            raise SafeError(code="Slack", message=f"{method} failed", hint=self._error_hint(data))
        return data

    def _team_params(self, params: dict[str, Any]) -> dict[str, Any]:
        if self._config.team_id:
            params["team_id"] = self._config.team_id
        return params

    async def list_channels(self, *, limit: int = 100, cursor: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "types": "public_channel",
            "exclude_archived": "true",
            "limit": str(min(limit, MAX_CHANNEL_PAGE)),
        }
        if cursor:
            params["cursor"] = cursor
        return await self.call("conversations.list", params=self._team_params(params))

    async def user_conversations(self, *, user_id: str, limit: int = 100, cursor: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "types": "public_channel",
            "exclude_archived": "true",
            "limit": str(min(limit, MAX_CHANNEL_PAGE)),
            "user": user_id,
        }
        if cursor:
            params["cursor"] = cursor
        return await self.call("users.conversations", params=self._team_params(params))

    async def post_message(self, *, channel_id: str, text: str) -> dict[str, Any]:
        return await self.call("chat.postMessage", json_body={"channel": channel_id, "text": text})

    async def resolve_channel_id(self, channel_name: str) -> str:
        """Find a public channel id by name; a leading ``#`` is ignored."""
        name = channel_name[1:] if channel_name.startswith("#") else channel_name
        data = await self.list_channels(limit=MAX_CHANNEL_PAGE)
        for channel in data.get("channels") or []:
            if not isinstance(channel, dict):
                continue
            if name in (channel.get("name"), channel.get("name_normalized")) and isinstance(channel.get("id"), str):
                return channel["id"]
        logger.debug("Slack channel %r not found", name)
        raise SafeError(code="Slack", message=f"Channel not found: {name}")

    async def channel_history(self, *, channel_id: str, limit: int = 10, cursor: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"channel": channel_id, "limit": str(min(limit, MAX_MESSAGE_PAGE))}
        if cursor:
            params["cursor"] = cursor
        return await self.call("conversations.history", params=params)

    async def thread_replies(self, *, channel_id: str, thread_ts: str, limit: int = 10) -> dict[str, Any]:
        params = {"channel": channel_id, "ts": thread_ts, "limit": str(min(limit, MAX_MESSAGE_PAGE))}
        return await self.call("conversations.replies", params=params)
