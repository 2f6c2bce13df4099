"""State behind an interactive category list.

The browser keeps the last loaded snapshot of categories together with the
list state the user picked, the debounced search field and the selection.
Every list, stats or tree view is computed from the snapshot on demand.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, List, Mapping, Optional

from ..constants import DEFAULT_SEARCH_DEBOUNCE_MS
from ..errors import CategoryError
from ..records import CategoryRecord, CategoryWithStats
from ..repositories.base import CategoryRepository
from ..utils.category_list import (
    ListResult,
    ListState,
    ParentFilter,
    SortBy,
    SortOrder,
    StatusFilter,
    query_categories,
)
from ..utils.category_stats import CategoryDashboardStats, dashboard_stats
from ..utils.category_tree import CategoryNode, build_category_tree, flatten_category_tree
from ..utils.debounce import SearchDebouncer
from ..utils.selection import SelectionTracker
from .category_service import CategoryService


logger = logging.getLogger(__name__)


class CategoryBrowser:
    def __init__(
        self,
        repository: CategoryRepository,
        *,
        search_delay_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS,
        page_size: int = 20,
        debouncer: Optional[SearchDebouncer] = None,
    ) -> None:
        self.repository = repository
        self.service = CategoryService(repository)
        self.search_delay_ms = search_delay_ms
        self.debouncer = debouncer or SearchDebouncer(search_delay_ms)
        self.selection = SelectionTracker()
        self.state = ListState(page_size=page_size)
        self.categories: List[CategoryWithStats] = []
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0
        self._lock = threading.Lock()

    def refresh(self) -> bool:
        """Reload the snapshot; returns ``False`` if it failed or was superseded.

        Overlapping refreshes are ordered by generation: only the most
        recently started one may replace the snapshot.
        """

        with self._lock:
            self._generation += 1
            generation = self._generation
            self.loading = True
            self.error = None
        try:
            categories = self.repository.get_categories_with_stats()
        except CategoryError as exc:
            with self._lock:
                if generation == self._generation:
                    self.error = exc.message
            logger.warning("Failed to load categories: %s", exc.message)
            return False
        else:
            with self._lock:
                if generation != self._generation:
                    logger.debug("Discarding stale category load (generation %d)", generation)
                    return False
                self.categories = categories
            return True
        finally:
            with self._lock:
                if generation == self._generation:
                    self.loading = False

    def on_search_input(self, value: str) -> None:
        self.debouncer.schedule(value, self.search_delay_ms, self._apply_search)

    def _apply_search(self, value: str) -> None:
        self._update_state(search_term=value)

    def set_status_filter(self, status_filter: StatusFilter | str) -> None:
        self._update_state(status_filter=StatusFilter(status_filter))

    def set_parent_filter(self, parent_filter: ParentFilter | str) -> None:
        self._update_state(parent_filter=ParentFilter(parent_filter))

    def set_sort(self, sort_by: SortBy | str, sort_order: SortOrder | str = SortOrder.ASC) -> None:
        self._update_state(sort_by=SortBy(sort_by), sort_order=SortOrder(sort_order))

    def set_page(self, page: int) -> None:
        with self._lock:
            self.state = replace(self.state, page=page)

    def clear_filters(self) -> None:
        self.debouncer.cancel()
        with self._lock:
            self.state = ListState(page_size=self.state.page_size)

    def _update_state(self, **changes: Any) -> None:
        # Any filter or sort change starts again from the first page.
        with self._lock:
            self.state = replace(self.state, page=1, **changes)

    def current_page(self) -> ListResult:
        with self._lock:
            categories, state = self.categories, self.state
        return query_categories(categories, state)

    def stats(self) -> CategoryDashboardStats:
        return dashboard_stats(self.categories)

    def tree(self) -> List[CategoryNode]:
        return flatten_category_tree(build_category_tree(self.categories))

    def select_visible(self) -> None:
        self.selection.select_all(category.id for category in self.current_page().items)

    def create_category(self, payload: Mapping[str, Any]) -> CategoryRecord:
        category = self.service.create_category(payload)
        self.refresh()
        return category

    def update_category(self, category_id: Any, payload: Mapping[str, Any]) -> CategoryRecord:
        category = self.service.update_category(category_id, payload)
        self.refresh()
        return category

    def delete_category(self, category_id: Any) -> None:
        self.service.delete_category(category_id)
        self.refresh()
        self.selection.discard_missing(category.id for category in self.categories)

    def delete_selected(self) -> List[Any]:
        deleted = self.service.bulk_delete_categories(self.selection.to_list())
        self.refresh()
        self.selection.discard_missing(category.id for category in self.categories)
        return deleted

    def close(self) -> None:
        self.debouncer.cancel()

    def __enter__(self) -> "CategoryBrowser":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
