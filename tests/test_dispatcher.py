"""Tool dispatcher behavior: envelopes, protocol errors, timeouts and auditing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest
from devhub_mcp.audit import AuditEvent, ErrorClass
from devhub_mcp.dispatcher import ToolDispatcher
from devhub_mcp.errors import InvalidParamsError, SafeError, text_result
from devhub_mcp.tools import HANDLERS
from devhub_mcp.validation import ValidatedArguments


@dataclass
class DummyAudit:
    events: list[AuditEvent] = field(default_factory=list)

    def write_event(self, event: AuditEvent) -> None:
        self.events.append(event)


def _dispatcher(handlers: dict[str, Any] | None = None, *, timeout_s: float = 5.0) -> tuple[ToolDispatcher, DummyAudit]:
    audit = DummyAudit()
    dispatcher = ToolDispatcher(
        clients=None,  # type: ignore[arg-type]
        handlers=handlers if handlers is not None else HANDLERS,
        audit=audit,  # type: ignore[arg-type]
        call_timeout_s=timeout_s,
    )
    return dispatcher, audit


@pytest.mark.asyncio
async def test_get_string_length_counts_user_perceived_characters() -> None:
    dispatcher, audit = _dispatcher()

    out = await dispatcher.call("getStringLength", {"input": "Hello 👋 World"})

    assert out == {"content": [{"type": "text", "text": "13"}], "isError": False}
    assert [e.outcome for e in audit.events] == ["succeeded"]


@pytest.mark.asyncio
async def test_unknown_tool_is_an_error_envelope_not_an_exception() -> None:
    dispatcher, audit = _dispatcher()

    out = await dispatcher.call("nonExistentTool", {})

    assert out["isError"] is True
    assert out["content"][0]["text"] == "Unknown tool: nonExistentTool"
    assert audit.events[0].outcome == "rejected"
    assert audit.events[0].error_class is ErrorClass.UNKNOWN_TOOL
    assert audit.events[0].integration is None


@pytest.mark.asyncio
async def test_missing_required_argument_raises_invalid_params() -> None:
    dispatcher, audit = _dispatcher()

    with pytest.raises(InvalidParamsError) as exc:
        await dispatcher.call("getStringLength", {})

    assert exc.value.param == "input"
    assert len(audit.events) == 1
    assert audit.events[0].outcome == "rejected"
    assert audit.events[0].error_class is ErrorClass.INVALID_PARAMS
    assert audit.events[0].integration == "core"


@pytest.mark.asyncio
async def test_wrongly_typed_argument_raises_invalid_params() -> None:
    dispatcher, _ = _dispatcher()

    with pytest.raises(InvalidParamsError) as exc:
        await dispatcher.call("getStringLength", {"input": 42})

    assert exc.value.param == "input"


@pytest.mark.asyncio
async def test_extra_arguments_are_ignored() -> None:
    dispatcher, _ = _dispatcher()

    out = await dispatcher.call("getStringLength", {"input": "abc", "unexpected": True})

    assert out["content"][0]["text"] == "3"


@pytest.mark.asyncio
async def test_upstream_failure_becomes_error_envelope() -> None:
    async def failing(_clients: Any, _args: ValidatedArguments) -> object:
        raise SafeError(code="GitHub", message="Not Found", hint="Not Found", status_code=404)

    dispatcher, audit = _dispatcher({"getGitHubRepoInfo": failing})

    out = await dispatcher.call("getGitHubRepoInfo", {"owner": "octo", "repo": "missing"})

    assert out["isError"] is True
    text = out["content"][0]["text"]
    assert "GitHub API error" in text
    assert "404" in text
    assert audit.events[0].outcome == "failed"
    assert audit.events[0].target == "octo/missing"
    assert audit.events[0].error_class is ErrorClass.UPSTREAM_FAILURE
    assert audit.events[0].upstream == "GitHub"
    assert audit.events[0].integration == "github"


@pytest.mark.asyncio
async def test_timeout_becomes_upstream_failure_envelope() -> None:
    async def slow(_clients: Any, _args: ValidatedArguments) -> object:
        await asyncio.sleep(5)
        return "never"

    dispatcher, audit = _dispatcher({"getGitHubUserInfo": slow}, timeout_s=0.01)

    out = await dispatcher.call("getGitHubUserInfo", {})

    assert out["isError"] is True
    assert out["content"][0]["text"].startswith("Upstream timeout:")
    assert audit.events[0].outcome == "failed"
    assert audit.events[0].upstream == "Timeout"


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_internal_error_envelope() -> None:
    async def broken(_clients: Any, _args: ValidatedArguments) -> object:
        raise ValueError("boom")

    dispatcher, audit = _dispatcher({"getGitHubUserInfo": broken})

    out = await dispatcher.call("getGitHubUserInfo", {})

    assert out == {"content": [{"type": "text", "text": "Internal error: boom"}], "isError": True}
    assert audit.events[0].error_class is ErrorClass.INTERNAL
    assert audit.events[0].reason == "ValueError"
    assert audit.events[0].outcome == "failed"


@pytest.mark.asyncio
async def test_handler_envelopes_pass_through_and_values_are_wrapped() -> None:
    envelope = text_result("as-is")

    async def returns_envelope(_clients: Any, _args: ValidatedArguments) -> object:
        return envelope

    async def returns_value(_clients: Any, _args: ValidatedArguments) -> object:
        return {"ok": True, "channels": []}

    dispatcher, _ = _dispatcher({"getGitHubUserInfo": returns_envelope, "slack_list_channels": returns_value})

    assert await dispatcher.call("getGitHubUserInfo", {}) is envelope
    wrapped = await dispatcher.call("slack_list_channels", {})
    assert wrapped == {"content": [{"type": "text", "text": '{"ok":true,"channels":[]}'}], "isError": False}


@pytest.mark.asyncio
async def test_handler_receives_defaults_and_options() -> None:
    seen: dict[str, Any] = {}

    async def capture(_clients: Any, args: ValidatedArguments) -> object:
        seen["per_page"] = args.get_int("per_page")
        seen["options"] = args.options
        return "ok"

    dispatcher, _ = _dispatcher({"getGitHubIssues": capture})

    await dispatcher.call("getGitHubIssues", {"owner": "o", "repo": "r", "include_pagination": True})

    assert seen["per_page"] == 30
    assert seen["options"].include_pagination is True
    assert seen["options"].compact is True


@pytest.mark.asyncio
async def test_verbose_calls_log_redacted_arguments_at_info(caplog: pytest.LogCaptureFixture) -> None:
    async def quiet(_clients: Any, _args: ValidatedArguments) -> object:
        return "ok"

    dispatcher, _ = _dispatcher({"getGitHubUserInfo": quiet})

    with caplog.at_level("INFO", logger="devhub_mcp.dispatcher"):
        await dispatcher.call("getGitHubUserInfo", {"verbose": True, "token": "ghp_abcdef"})

    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "getGitHubUserInfo" in messages
    assert "ghp_abcdef" not in messages
    assert "<redacted>" in messages


@pytest.mark.asyncio
async def test_each_call_emits_exactly_one_audit_event() -> None:
    dispatcher, audit = _dispatcher()

    await dispatcher.call("getStringLength", {"input": "a"})
    await dispatcher.call("nope", {})
    with pytest.raises(InvalidParamsError):
        await dispatcher.call("getStringLength", {})

    assert [e.outcome for e in audit.events] == ["succeeded", "rejected", "rejected"]
    assert len({e.correlation_id for e in audit.events}) == 3


@pytest.mark.asyncio
async def test_malformed_date_filter_is_an_error_envelope_not_invalid_params() -> None:
    dispatcher, audit = _dispatcher()

    out = await dispatcher.call("getGitHubPullRequests", {"owner": "o", "repo": "r", "created_after": "nope"})

    assert out["isError"] is True
    text = out["content"][0]["text"]
    assert text.startswith("GitHub API error:")
    assert "created_after" in text
    assert audit.events[0].error_class is ErrorClass.UPSTREAM_FAILURE
    assert audit.events[0].target == "o/r"
