"""Funnel filter constraints and the draft/commit editor that produces them."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from ops_console.app.ui.accessors import to_datetime


class _Constraint(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TextConstraint(_Constraint):
    type: Literal["text"] = "text"
    value: str = ""


class NumberConstraint(_Constraint):
    model_config = ConfigDict(populate_by_name=True, frozen=True, allow_inf_nan=False)

    type: Literal["number"] = "number"
    from_: float | None = Field(default=None, alias="from")
    to: float | None = None

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _blank_bound_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class DateConstraint(_Constraint):
    type: Literal["date"] = "date"
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _parseable_bound(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        text = str(value).strip()
        if to_datetime(text) is None:
            raise ValueError(f"'{text}' is not an ISO date")
        return text


class BooleanConstraint(_Constraint):
    type: Literal["boolean"] = "boolean"
    value: bool


FunnelConstraint = Annotated[
    Union[TextConstraint, NumberConstraint, DateConstraint, BooleanConstraint],
    Field(discriminator="type"),
]
FunnelFilter = dict[str, FunnelConstraint]

FUNNEL_ADAPTER: TypeAdapter[dict[str, FunnelConstraint]] = TypeAdapter(dict[str, FunnelConstraint])


def parse_funnel(payload: Any) -> FunnelFilter:
    """Validate a raw mapping into constraints; raises ``pydantic.ValidationError``."""
    return FUNNEL_ADAPTER.validate_python(payload)


def serialize_funnel(funnel: FunnelFilter) -> dict[str, dict[str, Any]]:
    return {key: constraint.to_payload() for key, constraint in funnel.items()}


class FunnelEditorError(RuntimeError):
    pass


class EditorState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    APPLIED = "applied"
    CANCELLED = "cancelled"


class FunnelEditor:
    """Draft/commit editing of a screen's funnel filter.

    ``open`` seeds the draft from the active filter, ``apply`` validates and
    hands it to ``on_apply``, ``cancel`` throws it away. ``last_outcome``
    keeps whether the last session ended APPLIED or CANCELLED.
    """

    def __init__(self, on_apply: Callable[[FunnelFilter], None]) -> None:
        self._on_apply = on_apply
        self.state = EditorState.CLOSED
        self.last_outcome: EditorState | None = None
        self._draft: dict[str, dict[str, Any]] = {}

    @property
    def is_open(self) -> bool:
        return self.state is EditorState.OPEN

    @property
    def draft(self) -> dict[str, dict[str, Any]]:
        return {key: dict(value) for key, value in self._draft.items()}

    def open(self, active: FunnelFilter) -> None:
        self._draft = serialize_funnel(active)
        self.state = EditorState.OPEN

    def set_text(self, key: str, value: str) -> None:
        self._require_open()
        self._draft[key] = {"type": "text", "value": value}

    def set_range(self, key: str, bound: Literal["from", "to"], value: Any, kind: Literal["number", "date"] = "number") -> None:
        self._require_open()
        current = self._draft.get(key, {})
        if current.get("type") != kind:
            current = {}
        self._draft[key] = {**current, "type": kind, bound: value}

    def set_boolean(self, key: str, value: bool) -> None:
        self._require_open()
        self._draft[key] = {"type": "boolean", "value": value}

    def clear(self, key: str) -> None:
        self._require_open()
        self._draft.pop(key, None)

    def reset(self) -> None:
        self._require_open()
        self._draft = {}

    def apply(self) -> FunnelFilter:
        self._require_open()
        funnel = parse_funnel(self._draft)
        self._on_apply(funnel)
        self._close(EditorState.APPLIED)
        return funnel

    def cancel(self) -> None:
        self._require_open()
        self._close(EditorState.CANCELLED)

    def _close(self, outcome: EditorState) -> None:
        self._draft = {}
        self.last_outcome = outcome
        self.state = EditorState.CLOSED

    def _require_open(self) -> None:
        if self.state is not EditorState.OPEN:
            raise FunnelEditorError("Funnel filter editor is not open")
