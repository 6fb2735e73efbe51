from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ops_console.app.ui.accessors import FieldRegistry, Record
from ops_console.app.ui.filters import ALL_CATEGORY, UNKNOWN_LOCATION, LocationRule


@dataclass(frozen=True)
class LocationFacet:
    id: str
    name: str
    count: int


def build_location_facets(
    records: Iterable[Record],
    registry: FieldRegistry,
    rule: LocationRule,
    known_locations: Iterable[Mapping[str, Any]] = (),
) -> list[LocationFacet]:
    """Sidebar categories with live counts.

    ``known_locations`` are configured cities (``{"id", "name"}``); those with
    no current records still appear with a zero count.
    """
    rows = list(records)
    counts: dict[str, int] = {}
    names: dict[str, str] = {}
    for row in rows:
        name = rule.location_of(row, registry) or UNKNOWN_LOCATION
        facet_id = name.lower()
        names.setdefault(facet_id, name)
        counts[facet_id] = counts.get(facet_id, 0) + 1

    facets = [LocationFacet(id=ALL_CATEGORY, name="All", count=len(rows))]
    facets.extend(LocationFacet(id=facet_id, name=names[facet_id], count=count) for facet_id, count in counts.items())

    for location in known_locations:
        name = str(location.get("name") or "").strip()
        if not name or name.lower() in counts:
            continue
        counts[name.lower()] = 0
        facets.append(LocationFacet(id=name.lower(), name=name, count=0))
    return facets
