"""Argument validation.

``validate_arguments`` checks an argument bag against a tool descriptor and returns either a
``ValidatedArguments`` view or an ``InvalidParams`` failure. It never raises and never coerces:
a numeric string is not a number and ``true`` is not a number.

Argument names the descriptor does not declare are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from .registry import ParamKind, ToolDescriptor


@dataclass(frozen=True, slots=True)
class CompactOptions:
    """Cross-cutting response shaping flags."""

    compact: bool = True
    compact_json: bool = True
    include_pagination: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class InvalidParams:
    """Validation failure naming the offending parameter."""

    param: str
    message: str


def _kind_matches(kind: ParamKind, value: Any) -> bool:
    if kind == "string":
        return isinstance(value, str)
    if kind == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "array":
        return isinstance(value, list)
    if kind == "object":
        return isinstance(value, dict)
    return False


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class ValidatedArguments:
    """Typed, read-only view over a validated argument bag.

    Every declared parameter is either present with the declared kind, filled with its
    declared default, or absent (optional without default). Accessors return None for
    absent optional values.
    """

    __slots__ = ("_values", "options")

    def __init__(self, values: Mapping[str, Any], options: CompactOptions) -> None:
        self._values = MappingProxyType(dict(values))
        self.options = options

    def __contains__(self, name: str) -> bool:
        return name in self._values

    @property
    def log_level(self) -> int:
        """Level for per-call diagnostics: INFO when the caller asked for verbose output."""
        return logging.INFO if self.options.verbose else logging.DEBUG

    def raw(self) -> Mapping[str, Any]:
        return self._values

    def get_str(self, name: str) -> str | None:
        v = self._values.get(name)
        return v if isinstance(v, str) else None

    def require_str(self, name: str) -> str:
        v = self.get_str(name)
        if v is None:
            raise KeyError(name)
        return v

    def get_int(self, name: str) -> int | None:
        v = self._values.get(name)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        return int(v)

    def get_bool(self, name: str) -> bool | None:
        v = self._values.get(name)
        return v if isinstance(v, bool) else None

    def get_list(self, name: str) -> list[Any] | None:
        v = self._values.get(name)
        return v if isinstance(v, list) else None

    def get_dict(self, name: str) -> dict[str, Any] | None:
        v = self._values.get(name)
        return v if isinstance(v, dict) else None


def _options_from(values: Mapping[str, Any]) -> CompactOptions:
    defaults = CompactOptions()

    def flag(name: str, default: bool) -> bool:
        v = values.get(name)
        return v if isinstance(v, bool) else default

    return CompactOptions(
        compact=flag("compact", defaults.compact),
        compact_json=flag("compact_json", defaults.compact_json),
        include_pagination=flag("include_pagination", defaults.include_pagination),
        verbose=flag("verbose", defaults.verbose),
    )


def validate_arguments(descriptor: ToolDescriptor, arguments: Mapping[str, Any] | None) -> ValidatedArguments | InvalidParams:
    """Validate an argument bag against a descriptor."""
    arguments = arguments or {}
    values: dict[str, Any] = {}

    for spec in descriptor.parameters:
        present = spec.name in arguments and arguments[spec.name] is not None
        if not present:
            if spec.required:
                return InvalidParams(param=spec.name, message=f"Missing required parameter: {spec.name}")
            if spec.has_default:
                values[spec.name] = spec.default
            continue

        value = arguments[spec.name]
        if not _kind_matches(spec.kind, value):
            return InvalidParams(
                param=spec.name,
                message=f"Expected {spec.name} to be a {spec.kind}, got {_type_name(value)}",
            )
        values[spec.name] = value

    return ValidatedArguments(values, _options_from(values))
