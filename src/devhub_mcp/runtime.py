"""Process-wide runtime: configuration, audit sink, clients and the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass

from .audit import AuditLogger
from .clients import Clients, build_clients
from .config import AppConfig, load_config_from_env
from .dispatcher import ToolDispatcher
from .tools import HANDLERS


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-server runtime dependencies shared across tool calls."""

    config: AppConfig
    audit: AuditLogger
    clients: Clients
    dispatcher: ToolDispatcher


_RUNTIME: Runtime | None = None


def build_runtime(config: AppConfig, *, clients: Clients | None = None, audit: AuditLogger | None = None) -> Runtime:
    """Assemble a runtime from explicit parts; missing parts are built from ``config``."""
    audit = audit or AuditLogger(
        sink_path=config.audit_log_path,
        max_bytes=config.audit_max_bytes,
        max_backups=config.audit_max_backups,
    )
    clients = clients or build_clients(config)
    dispatcher = ToolDispatcher(
        clients=clients,
        handlers=HANDLERS,
        audit=audit,
        call_timeout_s=config.limits.call_timeout_s,
    )
    return Runtime(config=config, audit=audit, clients=clients, dispatcher=dispatcher)


def initialize_runtime_from_env() -> Runtime:
    """Initialize and cache runtime from environment.

    Called at server startup (fail-fast on invalid values), and can also be used lazily.
    """
    global _RUNTIME  # pylint: disable=global-statement
    if _RUNTIME is not None:
        return _RUNTIME

    _RUNTIME = build_runtime(load_config_from_env())
    return _RUNTIME


def reset_runtime() -> None:
    """Drop the cached runtime so the next call re-reads the environment."""
    global _RUNTIME  # pylint: disable=global-statement
    _RUNTIME = None
