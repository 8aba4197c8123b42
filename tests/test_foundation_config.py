"""Foundational tests: configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from devhub_mcp.config import DEFAULT_GITHUB_API_BASE_URL, load_config_from_env
from devhub_mcp.errors import SafeError

_ALL_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_API_BASE_URL",
    "JIRA_BASE_URL",
    "JIRA_EMAIL",
    "JIRA_API_TOKEN",
    "SLACK_BOT_TOKEN",
    "SLACK_TEAM_ID",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
    "DEVHUB_MCP_CALL_TIMEOUT_S",
    "DEVHUB_MCP_HTTP_TIMEOUT_S",
    "DEVHUB_MCP_AUDIT_LOG_PATH",
    "DEVHUB_MCP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ALL_VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_config_without_credentials_leaves_integrations_unconfigured() -> None:
    cfg = load_config_from_env()

    assert cfg.github.token is None
    assert cfg.github.api_base_url == DEFAULT_GITHUB_API_BASE_URL
    assert cfg.jira.configured is False
    assert cfg.slack.configured is False
    assert cfg.google_calendar.configured is False
    assert cfg.audit_log_path is None
    assert cfg.log_level == logging.INFO


def test_load_config_reads_integration_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_example")
    monkeypatch.setenv("JIRA_BASE_URL", "https://example.atlassian.net/")
    monkeypatch.setenv("JIRA_EMAIL", "dev@example.com")
    monkeypatch.setenv("JIRA_API_TOKEN", "jira-token")
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-1")
    monkeypatch.setenv("SLACK_TEAM_ID", "T123")
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "cid")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("GOOGLE_REFRESH_TOKEN", "refresh")

    cfg = load_config_from_env()

    assert cfg.github.token == "ghp_example"
    assert cfg.jira.base_url == "https://example.atlassian.net"
    assert cfg.jira.configured is True
    assert cfg.slack.team_id == "T123"
    assert cfg.slack.configured is True
    assert cfg.google_calendar.configured is True


def test_load_config_parses_timeouts_and_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVHUB_MCP_CALL_TIMEOUT_S", "15")
    monkeypatch.setenv("DEVHUB_MCP_HTTP_TIMEOUT_S", "2.5")
    monkeypatch.setenv("DEVHUB_MCP_LOG_LEVEL", "debug")

    cfg = load_config_from_env()

    assert cfg.limits.call_timeout_s == 15.0
    assert cfg.limits.http_timeout_s == 2.5
    assert cfg.log_level == logging.DEBUG


@pytest.mark.parametrize("value", ["abc", "0", "-1"])
def test_load_config_rejects_invalid_timeout(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("DEVHUB_MCP_CALL_TIMEOUT_S", value)

    with pytest.raises(SafeError) as exc:
        _ = load_config_from_env()

    assert exc.value.code == "Config"
    assert "DEVHUB_MCP_CALL_TIMEOUT_S" in exc.value.message


def test_load_config_rejects_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVHUB_MCP_LOG_LEVEL", "chatty")

    with pytest.raises(SafeError):
        _ = load_config_from_env()


def test_load_config_validates_audit_path_absolute(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DEVHUB_MCP_AUDIT_LOG_PATH", "relative/audit.jsonl")
    with pytest.raises(SafeError) as exc:
        _ = load_config_from_env()
    assert "absolute path" in exc.value.message

    monkeypatch.setenv("DEVHUB_MCP_AUDIT_LOG_PATH", str(tmp_path / "audit.jsonl"))
    assert load_config_from_env().audit_log_path == tmp_path / "audit.jsonl"


def test_load_config_rejects_non_http_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JIRA_BASE_URL", "example.atlassian.net")

    with pytest.raises(SafeError) as exc:
        _ = load_config_from_env()

    assert "JIRA_BASE_URL" in exc.value.message
