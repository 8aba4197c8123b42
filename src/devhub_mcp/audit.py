"""Per-call audit trail.

Every dispatched tool call produces exactly one ``AuditEvent``, classified by the failure
channel it ended in (see ``ErrorClass``). Events name the tool, its integration and a
coarse target such as ``owner/repo``; argument values and credentials are never recorded.

Events are written as JSON lines to stderr and, when configured, to a size-rotated file.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path


class ErrorClass(str, Enum):
    """How a call failed, mirroring the error channels callers observe."""

    INVALID_PARAMS = "InvalidParams"
    UNKNOWN_TOOL = "UnknownTool"
    UPSTREAM_FAILURE = "UpstreamFailure"
    INTERNAL = "Internal"

    @property
    def outcome(self) -> str:
        # Malformed calls never reach a handler.
        if self in (ErrorClass.INVALID_PARAMS, ErrorClass.UNKNOWN_TOOL):
            return "rejected"
        return "failed"


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """One tool call as seen by the audit trail.

    ``upstream`` is the ``SafeError`` code of an upstream failure (``GitHub``, ``Timeout``,
    ``Config`` ...). ``reason`` is a short, already-redacted message.
    """

    correlation_id: str
    tool: str
    integration: str | None
    target: str
    error_class: ErrorClass | None = None
    upstream: str | None = None
    reason: str | None = None
    duration_ms: int | None = None
    timestamp: str = field(default_factory=_utc_now)

    @property
    def outcome(self) -> str:
        return "succeeded" if self.error_class is None else self.error_class.outcome

    def to_json(self) -> str:
        payload = {k: v for k, v in asdict(self).items() if v is not None}
        payload["outcome"] = self.outcome
        if self.error_class is not None:
            payload["error_class"] = self.error_class.value
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))


class AuditLogger:
    """Writes audit events to stderr and optionally to a rotated JSONL file.

    The file sink rolls over at ``max_bytes`` and keeps at least one backup
    (``audit.jsonl.1`` is the newest).
    """

    def __init__(self, *, sink_path: Path | None, max_bytes: int = 5 * 1024 * 1024, max_backups: int = 2) -> None:
        self._file: RotatingFileHandler | None = None
        if sink_path is not None:
            sink_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = RotatingFileHandler(
                sink_path,
                maxBytes=max_bytes,
                backupCount=max(max_backups, 1),
                encoding="utf-8",
                delay=True,
            )
            self._file.setFormatter(logging.Formatter("%(message)s"))

    def write_event(self, event: AuditEvent) -> None:
        line = event.to_json()
        print(line, file=sys.stderr)
        if self._file is not None:
            self._file.handle(logging.makeLogRecord({"msg": line, "levelno": logging.INFO, "levelname": "INFO"}))

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
