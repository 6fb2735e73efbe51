from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from ops_console.app.ui.accessors import FieldRegistry, Record, parse_leading_int

SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    width: int | str = 120


@dataclass(frozen=True)
class SortState:
    column: str | None = None
    direction: SortDirection = "asc"

    @property
    def is_active(self) -> bool:
        return self.column is not None


def next_sort_state(state: SortState, column: str) -> SortState:
    """Header click: asc -> desc -> unsorted on the same column, asc on a new one."""
    if state.column != column:
        return SortState(column=column, direction="asc")
    if state.direction == "asc":
        return SortState(column=column, direction="desc")
    return SortState()


def base_order(records: Iterable[Record]) -> list[Record]:
    return sorted(records, key=lambda row: parse_leading_int(row.get("id")), reverse=True)


def sort_records(records: Iterable[Record], registry: FieldRegistry, state: SortState) -> list[Record]:
    # sorted() is stable and keeps ties in input order even with reverse=True
    ordered = base_order(records)
    if not state.is_active:
        return ordered
    return sorted(
        ordered,
        key=lambda row: registry.sort_key(row, state.column),
        reverse=state.direction == "desc",
    )

