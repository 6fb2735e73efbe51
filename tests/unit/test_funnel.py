import pytest
from pydantic import ValidationError

from ops_console.app.ui.funnel import (
    EditorState,
    FunnelEditor,
    FunnelEditorError,
    NumberConstraint,
    TextConstraint,
    parse_funnel,
    serialize_funnel,
)


def test_parse_funnel_discriminates_on_type() -> None:
    funnel = parse_funnel(
        {
            "name": {"type": "text", "value": "ana"},
            "amount": {"type": "number", "from": "", "to": "5"},
        }
    )

    assert isinstance(funnel["name"], TextConstraint)
    assert isinstance(funnel["amount"], NumberConstraint)
    assert funnel["amount"].from_ is None
    assert funnel["amount"].to == 5.0


def test_serialize_uses_wire_names_and_drops_absent_bounds() -> None:
    funnel = parse_funnel({"amount": {"type": "number", "from": 1, "to": ""}})

    assert serialize_funnel(funnel) == {"amount": {"type": "number", "from": 1.0}}


def test_invalid_constraints_are_rejected() -> None:
    with pytest.raises(ValidationError):
        parse_funnel({"installed": {"type": "date", "from": "not a date"}})
    with pytest.raises(ValidationError):
        parse_funnel({"amount": {"type": "slider", "value": 3}})
    with pytest.raises(ValidationError):
        parse_funnel({"amount": {"type": "number", "from": "nan"}})
    with pytest.raises(ValidationError):
        parse_funnel({"amount": {"type": "number", "to": float("inf")}})


def test_apply_commits_draft_through_callback() -> None:
    applied = []
    editor = FunnelEditor(on_apply=applied.append)

    editor.open({})
    editor.set_text("name", "ana")
    editor.set_range("amount", "from", "10")
    editor.set_range("amount", "to", "")
    result = editor.apply()

    assert applied == [result]
    assert result["name"].value == "ana"
    assert result["amount"].from_ == 10.0
    assert result["amount"].to is None
    assert editor.state is EditorState.CLOSED
    assert editor.last_outcome is EditorState.APPLIED


def test_cancel_discards_draft() -> None:
    applied = []
    editor = FunnelEditor(on_apply=applied.append)
    active = parse_funnel({"name": {"type": "text", "value": "ana"}})

    editor.open(active)
    editor.clear("name")
    editor.set_boolean("active", True)
    editor.cancel()

    assert applied == []
    assert editor.last_outcome is EditorState.CANCELLED
    assert active["name"].value == "ana"


def test_invalid_draft_keeps_editor_open() -> None:
    applied = []
    editor = FunnelEditor(on_apply=applied.append)

    editor.open({})
    editor.set_range("amount", "from", "abc")
    with pytest.raises(ValidationError):
        editor.apply()

    assert editor.is_open
    assert applied == []


def test_switching_range_kind_resets_the_entry() -> None:
    editor = FunnelEditor(on_apply=lambda funnel: None)

    editor.open({})
    editor.set_range("created", "from", "5")
    editor.set_range("created", "to", "2024-01-31", kind="date")

    assert editor.draft == {"created": {"type": "date", "to": "2024-01-31"}}


def test_closed_editor_refuses_edits() -> None:
    editor = FunnelEditor(on_apply=lambda funnel: None)

    with pytest.raises(FunnelEditorError):
        editor.set_text("name", "ana")
    with pytest.raises(FunnelEditorError):
        editor.apply()
