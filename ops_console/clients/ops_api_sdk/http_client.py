from __future__ import annotations

import time
from typing import Any

import httpx

from ops_console.app.config import ConsoleSettings
from ops_console.clients.ops_api_sdk.errors import ApiError


class HttpClient:
    def __init__(
        self,
        settings: ConsoleSettings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or ConsoleSettings()
        self._client = client or httpx.Client(
            base_url=self.settings.OPS_BASE_URL,
            timeout=self.settings.OPS_TIMEOUT_SECONDS,
            verify=self.settings.OPS_VERIFY_SSL,
        )
        self._retry_max_attempts = max(1, self.settings.OPS_RETRY_MAX_ATTEMPTS)
        self._retry_backoff_ms = max(0, self.settings.OPS_RETRY_BACKOFF_MS)

    def request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"Accept": "application/json", **(headers or {})}
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        normalized_path = path if path.startswith("/") else f"/{path}"
        allow_retry = method.upper() == "GET"

        for attempt in range(1, self._retry_max_attempts + 1):
            try:
                response = self._client.request(
                    method=method,
                    url=normalized_path,
                    json=json_body,
                    headers=request_headers,
                    params=params,
                )
            except httpx.TimeoutException as exc:
                if (not allow_retry) or attempt >= self._retry_max_attempts:
                    raise ApiError(code="TIMEOUT_ERROR", message="Request timed out", details=str(exc)) from exc
                self._backoff(attempt)
                continue
            except httpx.TransportError as exc:
                if (not allow_retry) or attempt >= self._retry_max_attempts:
                    raise ApiError(code="NETWORK_ERROR", message="Network error while calling the operations API", details=str(exc)) from exc
                self._backoff(attempt)
                continue

            if response.status_code >= 400:
                error = ApiError.from_http_response(response)
                if allow_retry and self._is_retryable_status(error.status_code) and attempt < self._retry_max_attempts:
                    self._backoff(attempt)
                    continue
                raise error

            try:
                payload = response.json()
            except ValueError:
                return {}
            return payload if isinstance(payload, dict) else {"data": payload}

        raise ApiError(code="NETWORK_ERROR", message="Network error while calling the operations API", details="retry exhausted")

    def close(self) -> None:
        self._client.close()

    def _backoff(self, attempt: int) -> None:
        time.sleep((self._retry_backoff_ms * attempt) / 1000)

    @staticmethod
    def _is_retryable_status(status_code: int | None) -> bool:
        return bool(status_code and 500 <= status_code <= 599)
