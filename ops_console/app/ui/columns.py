from __future__ import annotations

from collections.abc import Iterable, Sequence

from ops_console.app.ui.listing_view import Column


class ColumnLayout:
    """Visible column set and display order for one screen.

    ``visible_keys`` keeps insertion order and may hold stale keys restored
    from storage; ``order`` is always a permutation of the screen's columns and
    alone decides the rendering sequence.
    """

    def __init__(
        self,
        columns: Sequence[Column],
        visible_keys: Iterable[str] | None = None,
        order: Iterable[str] | None = None,
    ) -> None:
        self.columns = tuple(columns)
        self._by_key = {column.key: column for column in self.columns}
        self.visible_keys: list[str] = _dedupe(visible_keys) if visible_keys is not None else list(self.all_keys)
        self.order: list[str] = reconcile_order(order, self.all_keys) if order is not None else list(self.all_keys)

    @property
    def all_keys(self) -> list[str]:
        return [column.key for column in self.columns]

    def is_visible(self, key: str) -> bool:
        return key in self.visible_keys

    def toggle(self, key: str) -> None:
        if key in self.visible_keys:
            self.visible_keys = [item for item in self.visible_keys if item != key]
        else:
            self.visible_keys = [*self.visible_keys, key]

    def select_all(self) -> None:
        self.visible_keys = list(self.all_keys)

    def deselect_all(self) -> None:
        self.visible_keys = []

    def reorder(self, dragged_key: str, target_key: str) -> bool:
        """Drop ``dragged_key`` onto ``target_key``.

        The dragged key is removed and reinserted at the index the target held
        before the removal, so a leftward drag lands just before the target and
        a rightward drag lands just after it. Returns False on a no-op.
        """
        if dragged_key == target_key or dragged_key not in self.order or target_key not in self.order:
            return False
        target_index = self.order.index(target_key)
        reordered = [key for key in self.order if key != dragged_key]
        reordered.insert(target_index, dragged_key)
        self.order = reordered
        return True

    def visible_columns_in_order(self) -> list[Column]:
        visible = set(self.visible_keys)
        return [self._by_key[key] for key in self.order if key in visible]

    def reset(self) -> None:
        self.visible_keys = list(self.all_keys)
        self.order = list(self.all_keys)


def reconcile_order(order: Iterable[str], all_keys: Sequence[str]) -> list[str]:
    known = set(all_keys)
    kept = [key for key in _dedupe(order) if key in known]
    return kept + [key for key in all_keys if key not in kept]


def _dedupe(keys: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for key in keys:
        if key not in seen:
            seen.append(key)
    return seen
