from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ops_console.app.error_presenter import print_error_banner
from ops_console.app.infrastructure.logging.logger import get_logger, log_event
from ops_console.app.ui.accessors import Record
from ops_console.app.ui.funnel import FunnelEditor
from ops_console.app.ui.table_printer import print_table
from ops_console.app.view_engine import RecordViewEngine
from ops_console.clients.ops_api_sdk.errors import ApiError

logger = get_logger(__name__)

COMMANDS_HELP = (
    "\nCommands: n=next, p=prev, g=goto, /=search, l=location, s=sort, v=toggle column, "
    "a=all columns, x=no columns, o=move column, f=funnel filter, c=clear filters, r=refresh, b=back"
)
FUNNEL_HELP = (
    "Funnel: t=text contains, n=number range, d=date range, y=yes/no, "
    "k=clear field, 0=reset all, a=apply, c=cancel"
)


class ListingConsole:
    """Interactive terminal loop over one screen's :class:`RecordViewEngine`."""

    def __init__(
        self,
        engine: RecordViewEngine,
        fetch_records: Callable[[], Iterable[Record]],
        fetch_locations: Callable[[], Iterable[Mapping[str, Any]]] | None = None,
    ) -> None:
        self.engine = engine
        self.fetch_records = fetch_records
        self.fetch_locations = fetch_locations
        self.known_locations: list[Mapping[str, Any]] = []

    @property
    def screen_name(self) -> str:
        return self.engine.screen.name

    def run(self) -> None:
        self._load_known_locations()
        needs_fetch = True
        while True:
            if needs_fetch:
                print(f"[loading] {self.engine.screen.title}...")
                self.engine.load(self.fetch_records)
                needs_fetch = False

            if self.engine.error is not None:
                print(f"[error] {self.engine.screen.title}: the listing could not be loaded.")
                print_error_banner(self.engine.error)
                print("Actions: t=retry, b=back")
                command = input("cmd error: ").strip().lower()
                if command == "b":
                    return
                needs_fetch = True
                continue

            self._render()
            print(COMMANDS_HELP)
            command = input("cmd: ").strip().lower()

            if command == "n":
                self.engine.next_page()
            elif command == "p":
                self.engine.prev_page()
            elif command == "g":
                requested = input("page: ").strip()
                if requested.isdigit():
                    self.engine.goto_page(int(requested))
            elif command == "/":
                self.engine.set_search(input("search: ").strip())
            elif command == "l":
                self._choose_location()
            elif command == "s":
                self._sort_by_header()
            elif command == "v":
                key = input("column key: ").strip()
                if key in self.engine.layout.all_keys:
                    self.engine.toggle_column(key)
                else:
                    print(f"[columns] Unknown column: {key}")
            elif command == "a":
                self.engine.select_all_columns()
            elif command == "x":
                self.engine.deselect_all_columns()
            elif command == "o":
                dragged = input("move column: ").strip()
                target = input("onto column: ").strip()
                if not self.engine.reorder_columns(dragged, target):
                    print("[columns] Order unchanged.")
            elif command == "f":
                self._edit_funnel(self.engine.open_funnel_editor())
            elif command == "c":
                self.engine.set_search("")
                self.engine.set_category("")
                self.engine.clear_funnel()
            elif command == "r":
                needs_fetch = True
            elif command == "b":
                return
            else:
                print(f"[cmd] Unknown command: {command}")

    def _render(self) -> None:
        page = self.engine.view()
        sort = self.engine.sort
        sort_label = f"{sort.column} {sort.direction}" if sort.is_active else "default"
        print(
            f"\n[{self.engine.screen.title}] page {page.current_page}/{max(page.total_pages, 1)} "
            f"records={page.total_count} location={self.engine.category} "
            f"search='{self.engine.search_text}' funnel={len(self.engine.funnel)} sort={sort_label}"
        )
        columns = [(column.key, column.label) for column in self.engine.visible_columns()]
        print_table(self.engine.screen.title.upper(), self.engine.display_rows(page.items), columns)

    def _load_known_locations(self) -> None:
        if self.fetch_locations is None or self.engine.screen.location is None:
            return
        try:
            self.known_locations = list(self.fetch_locations())
        except ApiError as error:
            log_event(logger, self.screen_name, "fetch_locations", "error", level=logging.WARNING, code=error.code)
            self.known_locations = []

    def _choose_location(self) -> None:
        facets = self.engine.facets(self.known_locations)
        for facet in facets:
            marker = "*" if facet.id == self.engine.category else " "
            print(f"{marker} {facet.id}: {facet.name} ({facet.count})")
        selected = input("location id: ").strip().lower()
        if selected and selected not in {facet.id for facet in facets}:
            print(f"[location] Unknown location: {selected}")
            return
        self.engine.set_category(selected)

    def _sort_by_header(self) -> None:
        options = {column.key: column.label for column in self.engine.visible_columns()}
        print(f"[sort] Columns: {options}")
        selected = input("header: ").strip()
        if selected not in options:
            print(f"[sort] Invalid column: {selected}")
            return
        state = self.engine.click_header(selected)
        label = f"{state.column} {state.direction}" if state.is_active else "default order"
        print(f"[sort] {label}")

    def _edit_funnel(self, editor: FunnelEditor) -> None:
        while editor.is_open:
            print(f"[funnel] Draft: {editor.draft}")
            print(FUNNEL_HELP)
            command = input("funnel: ").strip().lower()
            if command == "t":
                editor.set_text(input("field: ").strip(), input("contains: ").strip())
            elif command in {"n", "d"}:
                kind = "number" if command == "n" else "date"
                key = input("field: ").strip()
                editor.set_range(key, "from", input("from (blank=none): ").strip(), kind=kind)
                editor.set_range(key, "to", input("to (blank=none): ").strip(), kind=kind)
            elif command == "y":
                key = input("field: ").strip()
                editor.set_boolean(key, input("value (y/n): ").strip().lower() in {"y", "yes", "1", "true"})
            elif command == "k":
                editor.clear(input("field: ").strip())
            elif command == "0":
                editor.reset()
            elif command == "a":
                try:
                    editor.apply()
                except ValidationError as error:
                    print(f"[funnel] Invalid filter: {error.error_count()} error(s), fix the draft or cancel.")
                    log_event(logger, self.screen_name, "apply_funnel", "invalid", level=logging.WARNING)
            elif command == "c":
                editor.cancel()
            else:
                print(f"[funnel] Unknown command: {command}")
