"""Configuration loading for devhub-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
Credentials are treated as secrets and must never be emitted to agents, logs, or audit reasons.

A missing credential does not fail startup: each integration is optional, and its tools
report a Config error when called without credentials.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import SafeError

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """GitHub REST credentials. The token is optional (unauthenticated access otherwise)."""

    token: str | None = None
    api_base_url: str = DEFAULT_GITHUB_API_BASE_URL


@dataclass(frozen=True, slots=True)
class JiraConfig:
    """JIRA Cloud basic-auth credentials."""

    base_url: str | None = None
    email: str | None = None
    api_token: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.email and self.api_token)


@dataclass(frozen=True, slots=True)
class SlackConfig:
    """Slack bot credentials."""

    bot_token: str | None = None
    team_id: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.bot_token)


@dataclass(frozen=True, slots=True)
class GoogleCalendarConfig:
    """Google OAuth client + refresh token."""

    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)


@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Non-functional limits."""

    # Whole tool call (may span several upstream requests)
    call_timeout_s: float = 120.0

    # Single upstream request
    http_timeout_s: float = 30.0
    connect_timeout_s: float = 5.0


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level server configuration."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    jira: JiraConfig = field(default_factory=JiraConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)
    google_calendar: GoogleCalendarConfig = field(default_factory=GoogleCalendarConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    audit_log_path: Path | None = None
    audit_max_bytes: int = 5 * 1024 * 1024
    audit_max_backups: int = 2
    log_level: int = logging.INFO


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_positive_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise SafeError(code="Config", message=f"{name} must be a number") from exc
    if value <= 0:
        raise SafeError(code="Config", message=f"{name} must be greater than zero")
    return value


def _parse_log_level(raw: str | None) -> int:
    if raw is None:
        return logging.INFO
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise SafeError(code="Config", message="DEVHUB_MCP_LOG_LEVEL must be a logging level name")
    return level


def _parse_base_url(name: str, raw: str | None) -> str | None:
    if raw is None:
        return None
    if not raw.startswith(("https://", "http://")):
        raise SafeError(code="Config", message=f"{name} must be an http(s) URL")
    return raw.rstrip("/")


def load_config_from_env() -> AppConfig:
    """Load and validate configuration from environment variables.

    Raises:
        SafeError: If a configured value is invalid.
    """
    github = GitHubConfig(
        token=_env("GITHUB_TOKEN"),
        api_base_url=_parse_base_url("GITHUB_API_BASE_URL", _env("GITHUB_API_BASE_URL")) or DEFAULT_GITHUB_API_BASE_URL,
    )
    jira = JiraConfig(
        base_url=_parse_base_url("JIRA_BASE_URL", _env("JIRA_BASE_URL")),
        email=_env("JIRA_EMAIL"),
        api_token=_env("JIRA_API_TOKEN"),
    )
    slack = SlackConfig(bot_token=_env("SLACK_BOT_TOKEN"), team_id=_env("SLACK_TEAM_ID"))
    google_calendar = GoogleCalendarConfig(
        client_id=_env("GOOGLE_CLIENT_ID"),
        client_secret=_env("GOOGLE_CLIENT_SECRET"),
        refresh_token=_env("GOOGLE_REFRESH_TOKEN"),
    )
    default_limits = LimitsConfig()
    limits = LimitsConfig(
        call_timeout_s=_parse_positive_float("DEVHUB_MCP_CALL_TIMEOUT_S", default_limits.call_timeout_s),
        http_timeout_s=_parse_positive_float("DEVHUB_MCP_HTTP_TIMEOUT_S", default_limits.http_timeout_s),
        connect_timeout_s=default_limits.connect_timeout_s,
    )

    audit_path_raw = _env("DEVHUB_MCP_AUDIT_LOG_PATH")
    audit_path: Path | None = None
    if audit_path_raw:
        p = Path(audit_path_raw)
        if not p.is_absolute():
            raise SafeError(code="Config", message="DEVHUB_MCP_AUDIT_LOG_PATH must be an absolute path when set")
        audit_path = p

    return AppConfig(
        github=github,
        jira=jira,
        slack=slack,
        google_calendar=google_calendar,
        limits=limits,
        audit_log_path=audit_path,
        log_level=_parse_log_level(_env("DEVHUB_MCP_LOG_LEVEL")),
    )
