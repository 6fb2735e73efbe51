from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ops_console.app.error_presenter import build_error_payload
from ops_console.app.infrastructure.logging.logger import get_logger, log_event
from ops_console.app.preferences import ViewStatePersistence
from ops_console.app.screens import ScreenConfig
from ops_console.app.ui.accessors import FieldRegistry, Record
from ops_console.app.ui.columns import ColumnLayout
from ops_console.app.ui.facets import LocationFacet, build_location_facets
from ops_console.app.ui.filters import ALL_CATEGORY, FilterCriteria, apply_filters
from ops_console.app.ui.funnel import FunnelEditor, FunnelFilter
from ops_console.app.ui.listing_view import Column, SortState, next_sort_state, sort_records
from ops_console.app.ui.pagination import (
    DEFAULT_PAGE_SIZE,
    PageResult,
    PaginationState,
    clamp_page,
    goto_page,
    next_page,
    paginate,
    prev_page,
    reset_page,
    total_pages,
)

logger = get_logger(__name__)


class RecordViewEngine:
    """Filter, sort, paginate and lay out one screen's records.

    Inputs (records, search text, category, funnel, sort, page) are mutated
    through methods; derived lists are recomputed lazily and memoized on the
    versions of their inputs. Fetches use generations so that only the most
    recently started fetch may replace the record set.
    """

    def __init__(
        self,
        screen: ScreenConfig,
        persistence: ViewStatePersistence | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        registry: FieldRegistry | None = None,
    ) -> None:
        self.screen = screen
        self.registry = registry or screen.build_registry()
        self.persistence = persistence
        self.layout = ColumnLayout(screen.columns)
        self.search_text = ""
        self.category = ALL_CATEGORY
        self.funnel: FunnelFilter = {}
        self.sort = SortState()
        self.page_state = PaginationState(page=1, page_size=page_size)
        self.records: list[Record] = []
        self.error: dict[str, Any] | None = None
        self._generation = 0
        self._records_version = 0
        self._funnel_version = 0
        self._filtered_cache: tuple[tuple[Any, ...], list[Record]] | None = None
        self._sorted_cache: tuple[tuple[Any, ...], list[Record]] | None = None
        self.restore()

    # -- persisted state ---------------------------------------------------

    def restore(self) -> None:
        if self.persistence is None:
            return
        visible = self.persistence.load_visible_columns()
        order = self.persistence.load_column_order(self.layout.all_keys)
        self.layout = ColumnLayout(self.screen.columns, visible_keys=visible, order=order)
        self.funnel = self.persistence.load_funnel()
        self._funnel_version += 1

    def _persist_layout(self) -> None:
        if self.persistence is None:
            return
        self.persistence.save_visible_columns(self.layout.visible_keys)
        self.persistence.save_column_order(self.layout.order)

    # -- fetching ----------------------------------------------------------

    def begin_fetch(self) -> int:
        self._generation += 1
        return self._generation

    def complete_fetch(
        self,
        generation: int,
        records: Iterable[Record] | None = None,
        error: Exception | None = None,
    ) -> bool:
        if generation != self._generation:
            log_event(logger, self.screen.name, "fetch", "stale", level=logging.DEBUG, generation=generation, latest=self._generation)
            return False
        if error is not None:
            self.records = []
            self.error = build_error_payload(error)
            log_event(logger, self.screen.name, "fetch", "error", level=logging.WARNING, code=self.error["code"], trace_id=self.error["trace_id"])
        else:
            self.records = [row for row in records or [] if isinstance(row, Mapping)]
            self.error = None
            log_event(logger, self.screen.name, "fetch", "ok", count=len(self.records))
        self._records_version += 1
        clamp_page(self.page_state, self.total_pages)
        return True

    def load(self, fetcher: Callable[[], Iterable[Record]]) -> bool:
        generation = self.begin_fetch()
        try:
            records = list(fetcher())
        except Exception as error:  # noqa: BLE001
            return self.complete_fetch(generation, error=error)
        return self.complete_fetch(generation, records=records)

    # -- inputs ------------------------------------------------------------

    def set_search(self, text: str) -> None:
        if text != self.search_text:
            self.search_text = text
            reset_page(self.page_state)

    def set_category(self, category: str) -> None:
        normalized = category or ALL_CATEGORY
        if normalized != self.category:
            self.category = normalized
            reset_page(self.page_state)

    def apply_funnel(self, funnel: FunnelFilter) -> None:
        self.funnel = dict(funnel)
        self._funnel_version += 1
        reset_page(self.page_state)
        log_event(logger, self.screen.name, "apply_funnel", "ok", fields=sorted(self.funnel))
        if self.persistence is not None:
            self.persistence.save_funnel(self.funnel)

    def clear_funnel(self) -> None:
        self.apply_funnel({})

    def open_funnel_editor(self) -> FunnelEditor:
        editor = FunnelEditor(on_apply=self.apply_funnel)
        editor.open(self.funnel)
        return editor

    def click_header(self, column: str) -> SortState:
        self.sort = next_sort_state(self.sort, column)
        reset_page(self.page_state)
        return self.sort

    # -- pages -------------------------------------------------------------

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.sorted_records()), self.page_state.page_size)

    def next_page(self) -> int:
        return next_page(self.page_state, self.total_pages).page

    def prev_page(self) -> int:
        return prev_page(self.page_state).page

    def goto_page(self, page: int) -> int:
        return goto_page(self.page_state, page, self.total_pages).page

    # -- columns -----------------------------------------------------------

    def toggle_column(self, key: str) -> None:
        self.layout.toggle(key)
        self._persist_layout()

    def select_all_columns(self) -> None:
        self.layout.select_all()
        self._persist_layout()

    def deselect_all_columns(self) -> None:
        self.layout.deselect_all()
        self._persist_layout()

    def reorder_columns(self, dragged_key: str, target_key: str) -> bool:
        moved = self.layout.reorder(dragged_key, target_key)
        if moved:
            self._persist_layout()
        return moved

    def visible_columns(self) -> list[Column]:
        return self.layout.visible_columns_in_order()

    # -- derivations -------------------------------------------------------

    def criteria(self) -> FilterCriteria:
        return FilterCriteria(category=self.category, search_text=self.search_text, funnel=self.funnel)

    def filtered_records(self) -> list[Record]:
        key = (self._records_version, self.category, self.search_text, self._funnel_version)
        if self._filtered_cache is None or self._filtered_cache[0] != key:
            rows = apply_filters(
                self.records,
                self.registry,
                self.criteria(),
                location_rule=self.screen.location,
                search_fields=self.screen.search_fields,
            )
            self._filtered_cache = (key, rows)
        return self._filtered_cache[1]

    def sorted_records(self) -> list[Record]:
        filtered = self.filtered_records()
        key = (self._filtered_cache[0], self.sort)
        if self._sorted_cache is None or self._sorted_cache[0] != key:
            self._sorted_cache = (key, sort_records(filtered, self.registry, self.sort))
        return self._sorted_cache[1]

    def view(self) -> PageResult[Record]:
        rows = self.sorted_records()
        # a refetch or filter change can shrink the result below the current page
        clamp_page(self.page_state, total_pages(len(rows), self.page_state.page_size))
        return paginate(rows, self.page_state)

    def display_rows(self, rows: Iterable[Record] | None = None) -> list[dict[str, str]]:
        keys = [column.key for column in self.visible_columns()]
        source = self.view().items if rows is None else rows
        return [self.registry.display_row(row, keys) for row in source]

    def facets(self, known_locations: Iterable[Mapping[str, Any]] = ()) -> list[LocationFacet]:
        if self.screen.location is None:
            return [LocationFacet(id=ALL_CATEGORY, name="All", count=len(self.records))]
        return build_location_facets(self.records, self.registry, self.screen.location, known_locations)
