"""Selected category ids that survive search, filter and page changes."""

from __future__ import annotations

from typing import Any, Iterable, List, Set


class SelectionTracker:
    def __init__(self, ids: Iterable[Any] = ()) -> None:
        self._selected: Set[Any] = set(ids)

    @classmethod
    def from_iterable(cls, ids: Iterable[Any] | None) -> "SelectionTracker":
        return cls(ids or ())

    def toggle(self, category_id: Any) -> bool:
        """Flip one id; returns whether it is selected afterwards."""

        if category_id in self._selected:
            self._selected.discard(category_id)
            return False
        self._selected.add(category_id)
        return True

    def select_all(self, ids: Iterable[Any]) -> None:
        self._selected.update(ids)

    def clear(self) -> None:
        self._selected.clear()

    def is_selected(self, category_id: Any) -> bool:
        return category_id in self._selected

    def selected(self) -> Set[Any]:
        return set(self._selected)

    def discard_missing(self, existing_ids: Iterable[Any]) -> Set[Any]:
        """Drop ids that are no longer in ``existing_ids``; returns the dropped ids."""

        missing = self._selected - set(existing_ids)
        self._selected -= missing
        return missing

    def to_list(self) -> List[Any]:
        return sorted(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, category_id: Any) -> bool:
        return category_id in self._selected
