from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from ops_console.app.ui.accessors import MISSING, FieldRegistry, Record, to_bool, to_number, to_timestamp
from ops_console.app.ui.funnel import (
    BooleanConstraint,
    DateConstraint,
    FunnelFilter,
    NumberConstraint,
    TextConstraint,
)

ALL_CATEGORY = "all"
UNKNOWN_LOCATION = "Unknown"
_DAY_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class LocationRule:
    """Where a screen reads its location from.

    Either ``field`` (an accessor key) or ``address_field`` split on commas,
    taking ``segment`` (second-to-last part by default, the city in
    ``street, barangay, city, region``).
    """

    field: str | None = "city"
    address_field: str | None = None
    segment: int = -2
    match: Literal["equals", "contains"] = "equals"

    def location_of(self, record: Record, registry: FieldRegistry) -> str:
        if self.address_field:
            parts = registry.text(record, self.address_field).split(",")
            if len(parts) < 2:
                return ""
            try:
                return parts[self.segment].strip()
            except IndexError:
                return ""
        if self.field:
            return registry.text(record, self.field).strip()
        return ""


@dataclass(frozen=True)
class FilterCriteria:
    category: str = ALL_CATEGORY
    search_text: str = ""
    funnel: FunnelFilter = field(default_factory=dict)


def matches_category(record: Record, category: str, rule: LocationRule | None, registry: FieldRegistry) -> bool:
    if rule is None or not category or category == ALL_CATEGORY:
        return True
    selected = category.strip().lower()
    location = rule.location_of(record, registry).lower()
    if rule.match == "contains":
        return bool(location) and (selected in location or location in selected)
    return (location or UNKNOWN_LOCATION.lower()) == selected


def matches_search(record: Record, search_text: str, search_fields: Sequence[str], registry: FieldRegistry) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return any(needle in registry.text(record, key).lower() for key in search_fields)


def matches_constraint(record: Record, key: str, constraint: Any, registry: FieldRegistry) -> bool:
    value = registry.raw(record, key)

    if isinstance(constraint, TextConstraint):
        if not constraint.value:
            return True
        text = "" if value is MISSING else str(value)
        return constraint.value.lower() in text.lower()

    if isinstance(constraint, NumberConstraint):
        number = to_number(value)
        if number is None:
            return False
        if constraint.from_ is not None and number < constraint.from_:
            return False
        if constraint.to is not None and number > constraint.to:
            return False
        return True

    if isinstance(constraint, DateConstraint):
        stamp = to_timestamp(value)
        if stamp is None:
            return False
        if constraint.from_ is not None and stamp < to_timestamp(constraint.from_):
            return False
        if constraint.to is not None and stamp > _upper_bound(constraint.to):
            return False
        return True

    if isinstance(constraint, BooleanConstraint):
        flag = to_bool(value)
        return flag is not None and flag == constraint.value

    return True


def matches_funnel(record: Record, funnel: FunnelFilter, registry: FieldRegistry) -> bool:
    return all(matches_constraint(record, key, constraint, registry) for key, constraint in funnel.items())


def apply_filters(
    records: Iterable[Record],
    registry: FieldRegistry,
    criteria: FilterCriteria,
    location_rule: LocationRule | None = None,
    search_fields: Sequence[str] = (),
) -> list[Record]:
    # category and search are cheap, funnel runs last on what survives
    located = [row for row in records if matches_category(row, criteria.category, location_rule, registry)]
    searched = [row for row in located if matches_search(row, criteria.search_text, search_fields, registry)]
    if not criteria.funnel:
        return searched
    return [row for row in searched if matches_funnel(row, criteria.funnel, registry)]


def _upper_bound(bound: str) -> float:
    stamp = to_timestamp(bound)
    if len(bound.strip()) == 10:
        # date-only "to" includes the whole day
        return stamp + _DAY_SECONDS - 1e-6
    return stamp
