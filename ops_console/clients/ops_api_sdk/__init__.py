from ops_console.clients.ops_api_sdk.errors import ApiError
from ops_console.clients.ops_api_sdk.http_client import HttpClient
from ops_console.clients.ops_api_sdk.normalizers import normalize_records
from ops_console.clients.ops_api_sdk.preferences_client import PreferencesClient
from ops_console.clients.ops_api_sdk.records_client import RecordsClient

__all__ = [
    "ApiError",
    "HttpClient",
    "PreferencesClient",
    "RecordsClient",
    "normalize_records",
]
