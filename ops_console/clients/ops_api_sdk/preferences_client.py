from __future__ import annotations

from typing import Any

from ops_console.clients.ops_api_sdk.errors import ApiError
from ops_console.clients.ops_api_sdk.http_client import HttpClient
from ops_console.clients.ops_api_sdk.normalizers import extract_preference_value


class PreferencesClient:
    def __init__(self, http_client: HttpClient, access_token: str | None = None) -> None:
        self.http_client = http_client
        self.access_token = access_token

    def get_preference(self, key: str) -> Any:
        payload = self.http_client.request("GET", f"/user-preferences/{key}", token=self.access_token)
        return extract_preference_value(payload)

    def set_preference(self, key: str, value: Any) -> None:
        payload = self.http_client.request(
            "POST",
            f"/user-preferences/{key}",
            token=self.access_token,
            json_body={"value": value},
        )
        if payload.get("success") is False:
            raise ApiError(
                code="PREFERENCE_NOT_SAVED",
                message=str(payload.get("message") or "Preference was not saved"),
                details=payload.get("errors"),
            )
