"""Turn fetch failures into the error marker a listing screen shows.

The operations API is a Laravel backend: failed requests answer with
``{"message": ..., "errors": {"field": ["reason", ...]}}`` (422) or a bare
``message``. ``build_error_payload`` maps those onto a category the operator
can act on and flattens field errors into readable detail lines.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ops_console.clients.ops_api_sdk.errors import ApiError

TRANSPORT_CODES = {"NETWORK_ERROR", "TIMEOUT_ERROR"}

ACTIONS = {
    "network": "Check the connection and refresh",
    "session": "Sign in again",
    "forbidden": "Ask an administrator for access to this screen",
    "not_found": "Refresh the screen",
    "validation": "Correct the listed fields",
    "server": "Refresh; report the trace id if it keeps failing",
    "request": "Report the trace id",
    "internal": "Report the message",
}


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = classify_api_error(error)
        return {
            "category": category,
            "code": error.code,
            "message": error.message,
            "details": flatten_details(error.details),
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": ACTIONS[category],
        }
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error) or type(error).__name__,
        "details": [],
        "trace_id": None,
        "status_code": None,
        "action": ACTIONS["internal"],
    }


def classify_api_error(error: ApiError) -> str:
    status = error.status_code
    if error.code in TRANSPORT_CODES:
        return "network"
    if status in {401, 419}:
        # 419 is Laravel's expired session / CSRF token
        return "session"
    if status == 403:
        return "forbidden"
    if status == 404:
        return "not_found"
    if status == 422:
        return "validation"
    if status is not None and status >= 500:
        return "server"
    return "request"


def flatten_details(details: Any) -> list[str]:
    """``{"email": ["taken"], "name": "required"}`` -> ``["email: taken", "name: required"]``."""
    if details is None or details == "":
        return []
    if isinstance(details, Mapping):
        lines: list[str] = []
        for field, reasons in details.items():
            if isinstance(reasons, (list, tuple)):
                lines.extend(f"{field}: {reason}" for reason in reasons)
            else:
                lines.append(f"{field}: {reasons}")
        return lines
    if isinstance(details, (list, tuple)):
        return [str(item) for item in details]
    return [str(details)]


def print_error_banner(payload: dict[str, Any]) -> None:
    status = payload.get("status_code")
    heading = f"[ERROR] {payload.get('message')}"
    if status:
        heading += f" (HTTP {status})"
    print(heading)
    for line in payload.get("details") or []:
        print(f"  - {line}")
    print(
        f"  code={payload.get('code')} category={payload.get('category')} "
        f"trace_id={payload.get('trace_id') or 'n/a'}"
    )
    print(f"  next: {payload.get('action')}")
