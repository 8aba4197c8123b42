"""Redaction helpers for diagnostic logging.

Argument bags are logged when a call asks for verbose output. Anything that looks like a
credential is replaced before it reaches a log line.
"""

from __future__ import annotations

import re
from typing import Any

_CRED_FIELD_NAMES = {
    "token",
    "access_token",
    "refresh_token",
    "api_token",
    "authorization",
    "password",
    "client_secret",
}

_TOKEN_PREFIXES = (
    "ghp_",
    "gho_",
    "ghu_",
    "ghs_",
    "github_pat_",
    "xoxb-",
    "xoxp-",
    "ya29.",
)

_JWT_LIKE_RE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


def looks_like_secret_value(value: str) -> bool:
    """Return True if the value looks like a credential.

    Matching rules:
    - known token prefix at start after trimming leading whitespace
    - bearer/basic prefix treated case-insensitively
    - JWT-looking value treated as secret-like
    """
    if not isinstance(value, str):
        return False
    trimmed = value.lstrip()
    lowered = trimmed.lower()
    if lowered.startswith(("bearer ", "basic ")):
        return True
    if lowered.startswith(_TOKEN_PREFIXES):
        return True
    if len(trimmed) >= 40 and _JWT_LIKE_RE.match(trimmed):
        return True
    return False


def looks_like_credential_field_name(field_name: str) -> bool:
    """Return True if a key name looks like a credential field."""
    if not isinstance(field_name, str):
        return False
    return field_name.strip().lower() in _CRED_FIELD_NAMES


def redact_text(text: str) -> str:
    """Return a redacted representation safe for logs."""
    if not isinstance(text, str):
        return "<non-string>"
    if looks_like_secret_value(text):
        return "<redacted>"
    return text


def redact_arguments(obj: Any) -> Any:
    """Return a copy of an argument bag with credential-like keys and values replaced."""
    if isinstance(obj, dict):
        out: dict[str, Any] = {}
        for k, v in obj.items():
            if looks_like_credential_field_name(str(k)):
                out[k] = "<redacted>"
            else:
                out[k] = redact_arguments(v)
        return out
    if isinstance(obj, list):
        return [redact_arguments(item) for item in obj]
    if isinstance(obj, str):
        return redact_text(obj)
    return obj
