"""Tool dispatch: validate, run the handler, normalize into an envelope, audit.

The dispatcher holds no mutable state across calls. Each call gets its own correlation
id, its own validated argument view and exactly one audit event.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping

from .audit import AuditEvent, AuditLogger, ErrorClass, new_correlation_id
from .clients import Clients
from .compaction import serialize
from .errors import (
    InvalidParamsError,
    SafeError,
    internal_error,
    is_envelope,
    safe_error_to_result,
    text_result,
    unknown_tool_result,
)
from .registry import get_tool
from .safety import redact_arguments, redact_text
from .validation import InvalidParams, ValidatedArguments, validate_arguments

logger = logging.getLogger(__name__)

Handler = Callable[[Clients, ValidatedArguments], Awaitable[object]]

_TARGET_KEYS = ("projectKey", "issueKey", "channel_name", "channel_id", "user_id", "calendarId")


def _target_from_args(arguments: Mapping[str, Any]) -> str:
    """Coarse, non-sensitive identifier of what a call touches."""
    owner = arguments.get("owner")
    repo = arguments.get("repo")
    if isinstance(owner, str) and isinstance(repo, str) and owner and repo:
        return f"{owner}/{repo}"
    if isinstance(owner, str) and owner:
        return owner
    for key in _TARGET_KEYS:
        value = arguments.get(key)
        if isinstance(value, str) and value:
            return value
    return "<none>"


class ToolDispatcher:
    """Routes tool calls to handlers bound by name."""

    def __init__(
        self,
        *,
        clients: Clients,
        handlers: Mapping[str, Handler],
        audit: AuditLogger,
        call_timeout_s: float,
    ) -> None:
        self._clients = clients
        self._handlers = dict(handlers)
        self._audit = audit
        self._call_timeout_s = call_timeout_s

    async def call(self, name: str, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
        """Dispatch a single tool call.

        Returns:
            A response envelope. Unknown tools, upstream failures, timeouts and unexpected
            exceptions all become envelopes with ``isError`` set.

        Raises:
            InvalidParamsError: If a required argument is missing or an argument has the
                wrong primitive type.
        """
        arguments = arguments or {}
        correlation_id = new_correlation_id()
        start = time.monotonic()
        descriptor = get_tool(name)

        def record(error_class: ErrorClass | None = None, *, upstream: str | None = None, reason: str | None = None) -> None:
            self._audit.write_event(
                AuditEvent(
                    correlation_id=correlation_id,
                    tool=name,
                    integration=descriptor.integration if descriptor is not None else None,
                    target=_target_from_args(arguments),
                    error_class=error_class,
                    upstream=upstream,
                    reason=reason,
                    duration_ms=int((time.monotonic() - start) * 1000),
                )
            )

        handler = self._handlers.get(name)
        if descriptor is None or handler is None:
            record(ErrorClass.UNKNOWN_TOOL)
            return unknown_tool_result(name)

        validated = validate_arguments(descriptor, arguments)
        if isinstance(validated, InvalidParams):
            record(ErrorClass.INVALID_PARAMS, reason=validated.message)
            raise InvalidParamsError(validated.param, validated.message)

        logger.log(
            validated.log_level,
            "[%s] %s arguments=%s",
            correlation_id,
            name,
            redact_arguments(dict(arguments)),
        )

        try:
            result = await asyncio.wait_for(handler(self._clients, validated), timeout=self._call_timeout_s)
        except InvalidParamsError as err:
            record(ErrorClass.INVALID_PARAMS, reason=err.message)
            raise
        except asyncio.TimeoutError:
            err = SafeError(code="Timeout", message=f"{name} did not complete within {self._call_timeout_s:g}s")
            logger.warning("[%s] %s timed out", correlation_id, name)
            record(ErrorClass.UPSTREAM_FAILURE, upstream=err.code, reason=err.message)
            return safe_error_to_result(err)
        except SafeError as err:
            logger.log(validated.log_level, "[%s] %s failed: %s", correlation_id, name, err.code)
            record(ErrorClass.UPSTREAM_FAILURE, upstream=err.code, reason=redact_text(err.message))
            return safe_error_to_result(err)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("[%s] %s raised an unexpected error", correlation_id, name)
            record(ErrorClass.INTERNAL, reason=type(exc).__name__)
            return internal_error(f"Internal error: {redact_text(str(exc))}")

        if is_envelope(result):
            envelope = result
        elif isinstance(result, str):
            envelope = text_result(result)
        else:
            envelope = text_result(serialize(result, validated.options.compact_json))

        # A handler-built error envelope counts as an upstream failure.
        record(ErrorClass.UPSTREAM_FAILURE if envelope["isError"] else None)
        logger.log(validated.log_level, "[%s] %s %s", correlation_id, name, "failed" if envelope["isError"] else "succeeded")
        return envelope
