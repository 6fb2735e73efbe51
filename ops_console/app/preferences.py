from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from ops_console.app.infrastructure.logging.logger import get_logger, log_event
from ops_console.app.ui.columns import reconcile_order
from ops_console.app.ui.funnel import FunnelFilter, parse_funnel, serialize_funnel
from ops_console.clients.ops_api_sdk.errors import ApiError
from ops_console.clients.ops_api_sdk.preferences_client import PreferencesClient

logger = get_logger(__name__)


class PreferenceStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryPreferenceStore:
    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFilePreferenceStore:
    """All preferences of an operator in one JSON document.

    Writes go to ``<name>.tmp`` and are moved over the document. A document
    that is not a JSON object is moved aside to ``<name>.corrupt`` before the
    write replaces it.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def backup_path(self) -> Path:
        return self.path.with_name(f"{self.path.name}.corrupt")

    def get(self, key: str) -> str | None:
        try:
            payload = self._read()
        except (ValueError, OSError):
            return None
        value = payload.get(key) if isinstance(payload, dict) else None
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            payload = self._read()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            self._move_aside()
            payload = {}
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def _read(self) -> Any:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _move_aside(self) -> None:
        self.path.replace(self.backup_path)
        log_event(
            logger,
            "preferences",
            "file_set",
            "corrupt_backup",
            level=logging.WARNING,
            path=str(self.path),
            backup=str(self.backup_path),
        )


class RemotePreferenceStore:
    """``/user-preferences`` on the API, mirrored to a local store.

    Reads prefer the server and fall back to the local copy; writes always
    land locally and the server failure is only logged.
    """

    def __init__(self, client: PreferencesClient, fallback: PreferenceStore) -> None:
        self.client = client
        self.fallback = fallback

    def get(self, key: str) -> str | None:
        try:
            value = self.client.get_preference(key)
        except ApiError as error:
            log_event(logger, "preferences", "remote_get", "fallback", level=logging.WARNING, key=key, code=error.code)
            return self.fallback.get(key)
        if value is None or value == "":
            return self.fallback.get(key)
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        self.fallback.set(key, value)
        try:
            self.client.set_preference(key, value)
        except ApiError as error:
            log_event(logger, "preferences", "remote_set", "fallback", level=logging.WARNING, key=key, code=error.code)


class ViewStatePersistence:
    """Best-effort load/save of a screen's column layout and funnel filter."""

    def __init__(self, store: PreferenceStore, screen: str) -> None:
        self.store = store
        self.screen = screen

    @property
    def visible_columns_key(self) -> str:
        return f"{self.screen}VisibleColumns"

    @property
    def column_order_key(self) -> str:
        return f"{self.screen}ColumnOrder"

    @property
    def filters_key(self) -> str:
        return f"{self.screen}Filters"

    def load_visible_columns(self) -> list[str] | None:
        payload = self._read(self.visible_columns_key)
        if not _is_string_list(payload):
            return None
        return payload

    def load_column_order(self, all_keys: list[str]) -> list[str] | None:
        payload = self._read(self.column_order_key)
        if not _is_string_list(payload):
            return None
        return reconcile_order(payload, all_keys)

    def load_funnel(self) -> FunnelFilter:
        payload = self._read(self.filters_key)
        if not isinstance(payload, dict):
            return {}
        try:
            return parse_funnel(payload)
        except ValidationError:
            log_event(logger, self.screen, "load_funnel", "discarded", level=logging.WARNING, key=self.filters_key)
            return {}

    def save_visible_columns(self, keys: list[str]) -> bool:
        return self._write(self.visible_columns_key, list(keys))

    def save_column_order(self, order: list[str]) -> bool:
        return self._write(self.column_order_key, list(order))

    def save_funnel(self, funnel: FunnelFilter) -> bool:
        return self._write(self.filters_key, serialize_funnel(funnel))

    def _read(self, key: str) -> Any:
        try:
            raw = self.store.get(key)
        except (OSError, ApiError):
            log_event(logger, self.screen, "load_preference", "error", level=logging.WARNING, key=key)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            log_event(logger, self.screen, "load_preference", "discarded", level=logging.WARNING, key=key)
            return None

    def _write(self, key: str, value: Any) -> bool:
        try:
            self.store.set(key, json.dumps(value, ensure_ascii=False))
        except (OSError, ApiError) as error:
            log_event(logger, self.screen, "save_preference", "error", level=logging.ERROR, key=key, error=str(error))
            return False
        return True


def build_preference_store(backend: str, path: Path, client: PreferencesClient | None = None) -> PreferenceStore:
    if backend == "memory":
        return MemoryPreferenceStore()
    local = JsonFilePreferenceStore(path)
    if backend == "remote" and client is not None:
        return RemotePreferenceStore(client, fallback=local)
    return local


def _is_string_list(payload: Any) -> bool:
    return isinstance(payload, list) and all(isinstance(item, str) for item in payload)
