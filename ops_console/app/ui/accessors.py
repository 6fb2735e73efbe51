"""Column key to record value resolution.

Upstream endpoints are inconsistent about field spelling (``first_name`` on
one screen, ``First_Name`` on another, nested ``account.customer.city`` on a
third). A :class:`FieldSpec` lists every spelling a column may arrive under;
the :class:`FieldRegistry` resolves the first usable one and normalizes it
for display, sorting and searching. Every method is pure so the same value
drives the rendered cell and the sort key.
"""

from __future__ import annotations

import calendar
import math
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

EMPTY_VALUE = "-"
FIELD_KINDS = {"text", "number", "currency", "date", "datetime", "billing_day", "boolean"}
NUMERIC_KINDS = {"number", "currency", "billing_day"}
DATE_KINDS = {"date", "datetime"}
TRUE_TOKENS = {"1", "true", "t", "yes", "y", "on"}
FALSE_TOKENS = {"0", "false", "f", "no", "n", "off"}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __str__(self) -> str:
        return EMPTY_VALUE

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

Record = Mapping[str, Any]


@dataclass(frozen=True)
class FieldSpec:
    key: str
    candidates: tuple[str, ...] = ()
    kind: str = "text"
    derive: Callable[[Record], Any] | None = None

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind '{self.kind}' for {self.key}")

    @property
    def names(self) -> tuple[str, ...]:
        return self.candidates or (self.key,)


def lookup(record: Record, path: str) -> Any:
    """Read ``path`` from ``record``; dotted paths walk nested mappings."""
    if path in record:
        return record[path]
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def is_blank(value: Any) -> bool:
    if value is None or value is MISSING:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or stripped.lower() == "null"
    return False


def first_present(record: Record, names: Iterable[str]) -> Any:
    for name in names:
        value = lookup(record, name)
        if not is_blank(value):
            return value
    return MISSING


def to_number(value: Any) -> float | None:
    if isinstance(value, bool) or is_blank(value):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).replace(",", "").strip())
    except (ValueError, OverflowError):
        return None
    # non-finite values count as non-numeric
    return number if math.isfinite(number) else None


def to_datetime(value: Any) -> datetime | None:
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_timestamp(value: Any) -> float | None:
    parsed = to_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if is_blank(value):
        return None
    if isinstance(value, (int, float)):
        return value != 0
    normalized = str(value).strip().lower()
    if normalized in TRUE_TOKENS:
        return True
    if normalized in FALSE_TOKENS:
        return False
    return None


def parse_leading_int(value: Any) -> int:
    """``parseInt(value) || 0`` for record ids."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def last_day_of_month(today: date) -> int:
    return calendar.monthrange(today.year, today.month)[1]


class FieldRegistry:
    def __init__(
        self,
        specs: Iterable[FieldSpec] = (),
        currency_symbol: str = "₱",
        today: Callable[[], date] | None = None,
    ) -> None:
        self._specs: dict[str, FieldSpec] = {spec.key: spec for spec in specs}
        self.currency_symbol = currency_symbol
        self._today = today or date.today

    def spec(self, key: str) -> FieldSpec:
        return self._specs.get(key) or FieldSpec(key=key)

    def raw(self, record: Record, key: str) -> Any:
        spec = self.spec(key)
        if spec.derive is not None:
            value = spec.derive(record)
            return MISSING if is_blank(value) else value
        return first_present(record, spec.names)

    def resolve(self, record: Record, key: str) -> Any:
        spec = self.spec(key)
        value = self.raw(record, key)
        if value is MISSING:
            return MISSING
        if spec.kind in NUMERIC_KINDS:
            number = to_number(value)
            if number is None:
                return MISSING
            return int(number) if spec.kind == "billing_day" else number
        if spec.kind in DATE_KINDS:
            parsed = to_datetime(value)
            return MISSING if parsed is None else parsed
        if spec.kind == "boolean":
            flag = to_bool(value)
            return MISSING if flag is None else flag
        return str(value).strip()

    def display(self, record: Record, key: str) -> str:
        spec = self.spec(key)
        value = self.resolve(record, key)
        if value is MISSING:
            return EMPTY_VALUE
        if spec.kind == "currency":
            return f"{self.currency_symbol}{value:,.2f}"
        if spec.kind == "number":
            return f"{int(value)}" if float(value).is_integer() else f"{value}"
        if spec.kind == "billing_day":
            return str(last_day_of_month(self._today()) if value == 0 else value)
        if spec.kind == "datetime":
            return value.strftime("%m/%d/%Y, %I:%M:%S %p")
        if spec.kind == "date":
            return value.strftime("%b %d, %Y")
        if spec.kind == "boolean":
            return "Yes" if value else "No"
        return value

    def sort_key(self, record: Record, key: str) -> tuple[int, Any]:
        spec = self.spec(key)
        value = self.resolve(record, key)
        if spec.kind in NUMERIC_KINDS or spec.kind == "boolean":
            return (0, 0.0 if value is MISSING else float(value))
        if spec.kind in DATE_KINDS:
            return (0, float("-inf") if value is MISSING else to_timestamp(value))
        return (1, "" if value is MISSING else value.lower())

    def text(self, record: Record, key: str) -> str:
        value = self.raw(record, key)
        return "" if value is MISSING else str(value)

    def display_row(self, record: Record, keys: Iterable[str]) -> dict[str, str]:
        return {key: self.display(record, key) for key in keys}
