"""Error types and result envelope helpers.

Two failure channels exist and callers branch on them:
- InvalidParamsError is raised for malformed calls and surfaces as a protocol-level error.
- Everything else (unknown tools, upstream failures, unexpected faults) becomes an
  envelope with isError=True.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

UPSTREAM_LABELS: dict[str, str] = {
    "GitHub": "GitHub API error",
    "Jira": "JIRA API error",
    "Slack": "Slack API error",
    "GoogleCalendar": "Google Calendar API error",
    "Network": "Network error",
    "Timeout": "Upstream timeout",
    "Config": "Configuration error",
}


@dataclass(frozen=True, slots=True)
class SafeError(Exception):
    """An upstream or configuration failure safe to show to callers.

    Must never include credentials (tokens, API keys, refresh tokens).
    """

    code: str
    message: str
    hint: str | None = None
    status_code: int | None = None

    def describe(self) -> str:
        """Render a single human-readable line for an error envelope."""
        label = UPSTREAM_LABELS.get(self.code, self.code)
        text = f"{label}: {self.message}"
        if self.status_code is not None:
            text += f" (status {self.status_code})"
        if self.hint:
            text += f"\nResponse: {self.hint}"
        return text


class InvalidParamsError(Exception):
    """A required argument is missing or an argument has the wrong primitive type."""

    def __init__(self, param: str, message: str) -> None:
        super().__init__(message)
        self.param = param
        self.message = message


def upstream_error(code: str, message: str, *, status_code: int | None = None, hint: str | None = None) -> SafeError:
    """Build the SafeError raised by upstream clients."""
    return SafeError(code=code, message=message, hint=hint, status_code=status_code)


def missing_config_error(integration: str, variables: tuple[str, ...]) -> SafeError:
    """Error for a tool whose integration has no credentials configured."""
    return SafeError(
        code="Config",
        message=f"{integration} is not configured",
        hint=f"Set {', '.join(variables)}",
    )


def text_result(text: str) -> dict[str, Any]:
    """Build a success envelope."""
    return {"content": [{"type": "text", "text": text}], "isError": False}


def error_result(text: str) -> dict[str, Any]:
    """Build an error envelope."""
    return {"content": [{"type": "text", "text": text}], "isError": True}


def unknown_tool_result(name: str) -> dict[str, Any]:
    """Envelope for a call naming a tool that is not registered."""
    return error_result(f"Unknown tool: {name}")


def safe_error_to_result(err: SafeError) -> dict[str, Any]:
    """Convert a SafeError into an error envelope."""
    return error_result(err.describe())


def internal_error(message: str = "Internal error") -> dict[str, Any]:
    """Error envelope for unexpected failures."""
    return error_result(message)


def is_envelope(value: object) -> bool:
    """Return True if value is a well-formed response envelope."""
    if not isinstance(value, dict) or set(value.keys()) != {"content", "isError"}:
        return False
    content = value["content"]
    if not isinstance(value["isError"], bool) or not isinstance(content, list) or not content:
        return False
    for item in content:
        if not isinstance(item, dict) or item.get("type") != "text" or not isinstance(item.get("text"), str):
            return False
    return True
