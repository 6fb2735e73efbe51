import httpx
import pytest

from ops_console.app.error_presenter import ACTIONS, build_error_payload, flatten_details, print_error_banner
from ops_console.clients.ops_api_sdk.errors import ApiError


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (ApiError(code="NETWORK_ERROR", message="offline"), "network"),
        (ApiError(code="TIMEOUT_ERROR", message="slow"), "network"),
        (ApiError(code="HTTP_ERROR", message="Unauthenticated.", status_code=401), "session"),
        (ApiError(code="HTTP_ERROR", message="CSRF token mismatch.", status_code=419), "session"),
        (ApiError(code="HTTP_ERROR", message="denied", status_code=403), "forbidden"),
        (ApiError(code="HTTP_ERROR", message="missing", status_code=404), "not_found"),
        (ApiError(code="HTTP_ERROR", message="invalid", status_code=422), "validation"),
        (ApiError(code="HTTP_ERROR", message="down", status_code=503), "server"),
        (ApiError(code="HTTP_ERROR", message="teapot", status_code=418), "request"),
    ],
)
def test_api_errors_are_classified(error, category) -> None:
    payload = build_error_payload(error)

    assert payload["category"] == category
    assert payload["action"] == ACTIONS[category]
    assert payload["code"] == error.code
    assert payload["status_code"] == error.status_code


def test_unexpected_errors_are_internal() -> None:
    payload = build_error_payload(RuntimeError("boom"))

    assert payload["category"] == "internal"
    assert payload["code"] == "INTERNAL_ERROR"
    assert payload["message"] == "boom"
    assert payload["details"] == []


def test_laravel_validation_errors_become_detail_lines() -> None:
    response = httpx.Response(
        422,
        json={
            "message": "The given data was invalid.",
            "errors": {"email_address": ["The email address has already been taken."], "plan": "required"},
        },
        headers={"X-Request-ID": "req-3"},
    )

    payload = build_error_payload(ApiError.from_http_response(response))

    assert payload["category"] == "validation"
    assert payload["message"] == "The given data was invalid."
    assert payload["trace_id"] == "req-3"
    assert payload["details"] == [
        "email_address: The email address has already been taken.",
        "plan: required",
    ]


@pytest.mark.parametrize(
    ("details", "expected"),
    [
        (None, []),
        ("", []),
        ("Record locked", ["Record locked"]),
        (["first", 2], ["first", "2"]),
        ({"city": ["required", "too long"]}, ["city: required", "city: too long"]),
    ],
)
def test_flatten_details_shapes(details, expected) -> None:
    assert flatten_details(details) == expected


def test_banner_shows_status_details_and_trace_id(capsys) -> None:
    error = ApiError(
        code="HTTP_ERROR",
        message="The given data was invalid.",
        details={"account_no": ["The account no field is required."]},
        trace_id="trace-1",
        status_code=422,
    )

    print_error_banner(build_error_payload(error))

    out = capsys.readouterr().out
    assert "[ERROR] The given data was invalid. (HTTP 422)" in out
    assert "  - account_no: The account no field is required." in out
    assert "code=HTTP_ERROR" in out
    assert "trace_id=trace-1" in out
    assert "next: Correct the listed fields" in out


def test_banner_without_trace_id_or_status(capsys) -> None:
    print_error_banner(build_error_payload(ApiError(code="NETWORK_ERROR", message="offline")))

    out = capsys.readouterr().out
    assert "[ERROR] offline\n" in out
    assert "trace_id=n/a" in out
