from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: list[T]
    total_pages: int
    current_page: int
    total_count: int

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if count else 0


def paginate(records: Sequence[T], state: PaginationState) -> PageResult[T]:
    """Slice one page; an out-of-range page yields an empty slice, never an error."""
    start = (state.page - 1) * state.page_size
    return PageResult(
        items=list(records[start : start + state.page_size]),
        total_pages=total_pages(len(records), state.page_size),
        current_page=state.page,
        total_count=len(records),
    )


def next_page(state: PaginationState, pages: int) -> PaginationState:
    if state.page < pages:
        state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(1, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int, pages: int) -> PaginationState:
    if 1 <= page <= pages:
        state.page = page
    return state


def reset_page(state: PaginationState) -> PaginationState:
    state.page = 1
    return state


def clamp_page(state: PaginationState, pages: int) -> PaginationState:
    state.page = max(1, min(state.page, pages))
    return state
