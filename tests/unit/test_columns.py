from ops_console.app.ui.columns import ColumnLayout, reconcile_order
from ops_console.app.ui.listing_view import Column

COLUMNS = [Column("a", "A"), Column("b", "B"), Column("c", "C"), Column("d", "D")]


def _keys(layout: ColumnLayout) -> list[str]:
    return [column.key for column in layout.visible_columns_in_order()]


def test_all_columns_visible_by_default() -> None:
    layout = ColumnLayout(COLUMNS)

    assert _keys(layout) == ["a", "b", "c", "d"]


def test_toggle_twice_restores_visibility() -> None:
    layout = ColumnLayout(COLUMNS)

    layout.toggle("b")
    assert _keys(layout) == ["a", "c", "d"]
    layout.toggle("b")
    assert _keys(layout) == ["a", "b", "c", "d"]
    assert layout.visible_keys == ["a", "c", "d", "b"]


def test_select_and_deselect_all() -> None:
    layout = ColumnLayout(COLUMNS)

    layout.deselect_all()
    assert _keys(layout) == []
    layout.select_all()
    assert _keys(layout) == ["a", "b", "c", "d"]


def test_reorder_inserts_at_target_position() -> None:
    layout = ColumnLayout(COLUMNS)

    assert layout.reorder("a", "c") is True
    assert layout.order == ["b", "c", "a", "d"]

    layout.reset()
    assert layout.reorder("d", "b") is True
    assert layout.order == ["a", "d", "b", "c"]


def test_swapping_neighbours_twice_restores_order() -> None:
    layout = ColumnLayout(COLUMNS)

    layout.reorder("a", "b")
    assert layout.order == ["b", "a", "c", "d"]
    layout.reorder("b", "a")
    assert layout.order == ["a", "b", "c", "d"]


def test_reorder_no_ops() -> None:
    layout = ColumnLayout(COLUMNS)

    assert layout.reorder("a", "a") is False
    assert layout.reorder("zzz", "a") is False
    assert layout.order == ["a", "b", "c", "d"]


def test_stale_visible_keys_are_kept_but_not_rendered() -> None:
    layout = ColumnLayout(COLUMNS, visible_keys=["c", "gone", "a"])

    assert layout.visible_keys == ["c", "gone", "a"]
    assert _keys(layout) == ["a", "c"]


def test_reconcile_order_drops_unknown_and_appends_new_keys() -> None:
    assert reconcile_order(["c", "x", "a", "c"], ["a", "b", "c"]) == ["c", "a", "b"]
