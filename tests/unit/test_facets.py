from ops_console.app.ui.accessors import FieldRegistry
from ops_console.app.ui.facets import LocationFacet, build_location_facets
from ops_console.app.ui.filters import LocationRule


def test_facets_count_records_per_location() -> None:
    records = [{"city": "Cainta"}, {"city": "cainta"}, {"city": ""}, {"city": "Taytay"}]

    facets = build_location_facets(records, FieldRegistry(), LocationRule())

    assert facets == [
        LocationFacet("all", "All", 4),
        LocationFacet("cainta", "Cainta", 2),
        LocationFacet("unknown", "Unknown", 1),
        LocationFacet("taytay", "Taytay", 1),
    ]


def test_configured_locations_without_records_get_zero_count() -> None:
    records = [{"city": "Taytay"}]
    known = [{"id": 1, "name": "Antipolo"}, {"id": 2, "name": "taytay"}, {"id": 3, "name": ""}]

    facets = build_location_facets(records, FieldRegistry(), LocationRule(), known_locations=known)

    assert [(facet.id, facet.count) for facet in facets] == [("all", 1), ("taytay", 1), ("antipolo", 0)]


def test_facets_from_address_segment() -> None:
    records = [{"address": "Blk 1, San Juan, Cainta, Rizal"}, {"address": "Lot 2, Dolores, Taytay, Rizal"}]
    rule = LocationRule(field=None, address_field="address", match="contains")

    facets = build_location_facets(records, FieldRegistry(), rule)

    assert [facet.name for facet in facets] == ["All", "Cainta", "Taytay"]
