from __future__ import annotations

from typing import Any


def normalize_records(payload: Any) -> list[dict[str, Any]]:
    """Extract the record list from the envelopes the operations API uses.

    Accepts a bare list, ``{"rows": [...]}``, ``{"items": [...]}``,
    ``{"data": [...]}`` and the paginated ``{"data": {"data": [...]}}`` shape.
    Non-mapping entries are dropped.
    """
    rows: Any = []
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        for envelope in ("rows", "items", "data"):
            candidate = payload.get(envelope)
            if isinstance(candidate, list):
                rows = candidate
                break
            if isinstance(candidate, dict) and isinstance(candidate.get("data"), list):
                rows = candidate["data"]
                break
    return [row for row in rows if isinstance(row, dict)]


def extract_preference_value(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    if payload.get("success") is False:
        return None
    data = payload.get("data")
    if isinstance(data, dict):
        return data.get("value")
    return payload.get("value")
