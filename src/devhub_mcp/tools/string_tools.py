"""String utility tools."""

from __future__ import annotations

import logging

import regex

from ..clients import Clients
from ..validation import ValidatedArguments

logger = logging.getLogger(__name__)

# Extended grapheme cluster (Unicode UAX #29).
_GRAPHEME = regex.compile(r"\X")


def count_graphemes(text: str) -> int:
    """Count user-perceived characters (extended grapheme clusters)."""
    return sum(1 for _ in _GRAPHEME.finditer(text))


async def tool_get_string_length(clients: Clients, args: ValidatedArguments) -> str:
    text = args.require_str("input")
    length = count_graphemes(text)
    logger.log(args.log_level, "getStringLength: %d characters", length)
    return str(length)
