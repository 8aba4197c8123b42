"""Capability bundle of upstream clients handed to every tool handler."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .calendar_client import GoogleCalendarClient
from .config import AppConfig
from .github_client import GitHubClient
from .jira_client import JiraClient
from .slack_client import SlackClient


@dataclass(frozen=True, slots=True)
class Clients:
    """Upstream clients built once from configuration."""

    github: GitHubClient
    jira: JiraClient
    slack: SlackClient
    calendar: GoogleCalendarClient


def build_clients(config: AppConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> Clients:
    """Create every client; integrations without credentials fail on first use, not here."""
    return Clients(
        github=GitHubClient(config=config.github, limits=config.limits, transport=transport),
        jira=JiraClient(config=config.jira, limits=config.limits, transport=transport),
        slack=SlackClient(config=config.slack, limits=config.limits, transport=transport),
        calendar=GoogleCalendarClient(config=config.google_calendar, limits=config.limits, transport=transport),
    )
