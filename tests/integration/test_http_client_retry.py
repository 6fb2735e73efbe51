import httpx
import pytest

from ops_console.app.config import ConsoleSettings
from ops_console.clients.ops_api_sdk.errors import ApiError
from ops_console.clients.ops_api_sdk.http_client import HttpClient


class _Transport:
    def __init__(self, responses):
        self.responses = responses
        self.calls = 0
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.responses[self.calls]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


def _client(transport: _Transport) -> HttpClient:
    settings = ConsoleSettings(
        _env_file=None,
        OPS_BASE_URL="http://ops.test/api",
        OPS_RETRY_MAX_ATTEMPTS=3,
        OPS_RETRY_BACKOFF_MS=0,
    )
    return HttpClient(
        settings=settings,
        client=httpx.Client(base_url=settings.OPS_BASE_URL, transport=httpx.MockTransport(transport)),
    )


def test_get_retries_on_5xx_and_timeout() -> None:
    transport = _Transport(
        [
            httpx.ReadTimeout("timeout"),
            httpx.Response(503, json={"success": False, "message": "down"}),
            httpx.Response(200, json={"success": True, "data": []}),
        ]
    )

    payload = _client(transport).request("GET", "/job-orders")

    assert payload["success"] is True
    assert transport.calls == 3
    assert transport.requests[0].url.path == "/api/job-orders"


def test_post_is_not_retried() -> None:
    transport = _Transport([httpx.Response(503, json={"message": "down"})])

    with pytest.raises(ApiError) as raised:
        _client(transport).request("POST", "/user-preferences/customerFilters", json_body={"value": "{}"})

    assert raised.value.status_code == 503
    assert transport.calls == 1


def test_no_retry_on_4xx() -> None:
    transport = _Transport([httpx.Response(404, json={"success": False, "message": "Not found"}, headers={"X-Request-ID": "req-9"})])

    with pytest.raises(ApiError) as raised:
        _client(transport).request("GET", "/billing")

    assert raised.value.message == "Not found"
    assert raised.value.trace_id == "req-9"
    assert transport.calls == 1


def test_transport_errors_exhaust_into_network_error() -> None:
    transport = _Transport([httpx.ConnectError("refused")] * 3)

    with pytest.raises(ApiError) as raised:
        _client(transport).request("GET", "/billing")

    assert raised.value.code == "NETWORK_ERROR"
    assert transport.calls == 3


def test_timeout_on_last_attempt_is_timeout_error() -> None:
    transport = _Transport([httpx.ReadTimeout("slow")] * 3)

    with pytest.raises(ApiError) as raised:
        _client(transport).request("GET", "/billing")

    assert raised.value.code == "TIMEOUT_ERROR"


def test_bearer_token_and_list_payload() -> None:
    transport = _Transport([httpx.Response(200, json=[{"id": 1}])])

    payload = _client(transport).request("GET", "cities", token="tok-1")

    assert payload == {"data": [{"id": 1}]}
    assert transport.requests[0].headers["Authorization"] == "Bearer tok-1"
    assert transport.requests[0].headers["Accept"] == "application/json"
