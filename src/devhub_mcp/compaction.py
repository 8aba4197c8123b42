"""Response compaction, pagination metadata and serialization."""

from __future__ import annotations

import json
import math
from typing import Any

from .errors import text_result
from .extractors import ResourceKind, extract
from .validation import CompactOptions

_COUNT_KEYS = ("total_count", "total")


def _is_counted_page(raw: Any) -> bool:
    return isinstance(raw, dict) and isinstance(raw.get("items"), list) and any(k in raw for k in _COUNT_KEYS)


def compact(raw: Any, kind: ResourceKind, options: CompactOptions) -> Any:
    """Reduce an upstream payload to the essential fields of ``kind``.

    With ``options.compact`` false the payload is returned unmodified. Sequences are
    mapped element-wise; paged search results keep their total and map ``items``.
    """
    if not options.compact:
        return raw
    if isinstance(raw, list):
        return [extract(kind, item) for item in raw]
    if _is_counted_page(raw):
        out = {k: raw[k] for k in _COUNT_KEYS if k in raw}
        out["items"] = [extract(kind, item) for item in raw["items"]]
        return out
    return extract(kind, raw)


def add_list_pagination(data: Any, *, page: int, per_page: int) -> Any:
    """Attach page metadata to a GitHub-style listing.

    A bare sequence has no known total: when it fills the page the total is reported
    as ``"unknown"``.
    """
    if isinstance(data, list):
        return {
            "items": data,
            "pagination": {
                "page": page,
                "per_page": per_page,
                "total_items": "unknown" if len(data) >= per_page else len(data),
            },
        }
    if isinstance(data, dict) and "items" in data:
        total = data.get("total_count", data.get("total"))
        return {**data, "pagination": {"page": page, "per_page": per_page, "total_items": total}}
    return data


def add_counted_pagination(data: Any, *, start_at: int, max_results: int, total: int | None) -> Any:
    """Attach offset-based page metadata to a counted result."""
    if not isinstance(data, dict):
        return data
    known = total if isinstance(total, int) and not isinstance(total, bool) else 0
    page_count = math.ceil(known / max_results) if max_results > 0 else 0
    current_page = start_at // max_results + 1 if max_results > 0 else 1
    return {
        **data,
        "pagination": {
            "startAt": start_at,
            "maxResults": max_results,
            "total": total,
            "pageCount": page_count,
            "currentPage": current_page,
        },
    }


def serialize(value: Any, compact_json: bool) -> str:
    """Render a JSON value; only whitespace differs between the two modes."""
    if compact_json:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(value, indent=2, ensure_ascii=False)


def render(value: Any, options: CompactOptions) -> dict[str, Any]:
    """Serialize an already-shaped value into a success envelope."""
    return text_result(serialize(value, options.compact_json))
