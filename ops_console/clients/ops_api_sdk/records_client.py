from __future__ import annotations

from typing import Any

from ops_console.clients.ops_api_sdk.http_client import HttpClient
from ops_console.clients.ops_api_sdk.normalizers import normalize_records


class RecordsClient:
    def __init__(self, http_client: HttpClient, access_token: str | None = None) -> None:
        self.http_client = http_client
        self.access_token = access_token

    def fetch_records(self, resource: str, scope: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        payload = self.http_client.request(
            "GET",
            resource,
            token=self.access_token,
            params=_build_query_params(**(scope or {})),
        )
        return normalize_records(payload)

    def fetch_cities(self) -> list[dict[str, Any]]:
        return self.fetch_records("/cities")


def _build_query_params(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value not in (None, "")}
