from ops_console.app.console import ListingConsole
from ops_console.app.preferences import MemoryPreferenceStore, ViewStatePersistence
from ops_console.app.screens import get_screen
from ops_console.app.view_engine import RecordViewEngine
from ops_console.clients.ops_api_sdk.errors import ApiError

RECORDS = [
    {"id": "1", "First_Name": "Ana", "Last_Name": "Cruz", "City": "Cainta", "Installation_Fee": 500},
    {"id": "2", "first_name": "Bo", "last_name": "Reyes", "city": "Taytay", "installation_fee": 1500},
    {"id": "3", "First_Name": "Cora", "City": "Cainta Rizal", "Installation_Fee": 0},
]


def _feed(monkeypatch, answers) -> None:
    iterator = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _: next(iterator))


def _engine(store=None) -> RecordViewEngine:
    screen = get_screen("job_orders")
    persistence = ViewStatePersistence(store, screen.name) if store is not None else None
    return RecordViewEngine(screen, persistence=persistence)


def test_search_sort_and_back(monkeypatch, capsys) -> None:
    engine = _engine()
    _feed(monkeypatch, ["/", "ana", "s", "Full_Name", "b"])

    ListingConsole(engine, fetch_records=lambda: RECORDS).run()

    out = capsys.readouterr().out
    assert engine.search_text == "ana"
    assert engine.sort.column == "Full_Name"
    assert "Ana Cruz" in out
    assert "₱500.00" in out


def test_location_filter_uses_facets(monkeypatch, capsys) -> None:
    engine = _engine()
    _feed(monkeypatch, ["l", "cainta", "b"])

    ListingConsole(
        engine,
        fetch_records=lambda: RECORDS,
        fetch_locations=lambda: [{"id": 9, "name": "Antipolo"}],
    ).run()

    out = capsys.readouterr().out
    assert "antipolo: Antipolo (0)" in out
    assert engine.category == "cainta"
    assert [row["id"] for row in engine.sorted_records()] == ["3", "1"]


def test_failed_locations_fetch_still_lists(monkeypatch) -> None:
    engine = _engine()
    _feed(monkeypatch, ["b"])

    def _no_cities():
        raise ApiError(code="NETWORK_ERROR", message="offline")

    console = ListingConsole(engine, fetch_records=lambda: RECORDS, fetch_locations=_no_cities)
    console.run()

    assert console.known_locations == []
    assert engine.view().total_count == 3


def test_error_banner_then_retry(monkeypatch, capsys) -> None:
    engine = _engine()
    calls = {"count": 0}

    def _fetch():
        calls["count"] += 1
        if calls["count"] == 1:
            raise ApiError(code="HTTP_ERROR", message="down", status_code=503, trace_id="trace-7")
        return RECORDS

    _feed(monkeypatch, ["t", "b"])

    ListingConsole(engine, fetch_records=_fetch).run()

    out = capsys.readouterr().out
    assert "trace_id=trace-7" in out
    assert calls["count"] == 2
    assert engine.error is None


def test_funnel_editor_apply_and_persist(monkeypatch) -> None:
    store = MemoryPreferenceStore()
    engine = _engine(store)
    _feed(monkeypatch, ["f", "n", "Installation_Fee", "100", "", "a", "b"])

    ListingConsole(engine, fetch_records=lambda: RECORDS).run()

    assert engine.funnel["Installation_Fee"].from_ == 100.0
    assert [row["id"] for row in engine.sorted_records()] == ["2", "1"]
    assert "jobOrderFilters" in store.values


def test_invalid_funnel_draft_can_be_cancelled(monkeypatch, capsys) -> None:
    engine = _engine()
    _feed(monkeypatch, ["f", "n", "Installation_Fee", "cheap", "", "a", "c", "b"])

    ListingConsole(engine, fetch_records=lambda: RECORDS).run()

    assert "Invalid filter" in capsys.readouterr().out
    assert engine.funnel == {}


def test_column_commands_persist_layout(monkeypatch) -> None:
    store = MemoryPreferenceStore()
    engine = _engine(store)
    _feed(monkeypatch, ["v", "City", "o", "Full_Name", "id", "b"])

    ListingConsole(engine, fetch_records=lambda: RECORDS).run()

    assert not engine.layout.is_visible("City")
    assert engine.layout.order[0] == "Full_Name"
    assert "jobOrderVisibleColumns" in store.values
    assert "jobOrderColumnOrder" in store.values
