"""Search, filter, sort and paginate an in-memory list of categories.

Every function here is pure: it takes a snapshot of category records plus the
list state the user picked and returns new lists. Pages past the end come back
empty; clamping the page number is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from . import pagination


class StatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class ParentFilter(str, Enum):
    ALL = "all"
    TOP_LEVEL = "top-level"
    SUBCATEGORIES = "subcategories"


class SortBy(str, Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    PRODUCT_COUNT = "product_count"
    STATUS = "status"

    @classmethod
    def _missing_(cls, value: object) -> Optional["SortBy"]:
        aliases = {"createdAt": cls.CREATED_AT, "productCount": cls.PRODUCT_COUNT}
        return aliases.get(value) if isinstance(value, str) else None


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ListState:
    search_term: str = ""
    status_filter: StatusFilter = StatusFilter.ALL
    parent_filter: ParentFilter = ParentFilter.ALL
    sort_by: SortBy = SortBy.NAME
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        # Accept raw strings from query args; unknown values raise ValueError.
        self.status_filter = StatusFilter(self.status_filter)
        self.parent_filter = ParentFilter(self.parent_filter)
        self.sort_by = SortBy(self.sort_by)
        self.sort_order = SortOrder(self.sort_order)
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")


@dataclass
class ListResult:
    items: List[Any]
    total_matched: int
    page: int
    page_size: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.total_pages = pagination.total_pages(self.total_matched, self.page_size)


def _name_key(category: Any) -> str:
    return (category.name or "").lower()


def _status_key(category: Any) -> str:
    return (category.status or "").lower()


def _created_at_key(category: Any) -> datetime:
    return category.created_at or datetime.min


def _product_count_key(category: Any) -> int:
    return getattr(category, "product_count", None) or 0


SORT_KEYS: Dict[SortBy, Callable[[Any], Any]] = {
    SortBy.NAME: _name_key,
    SortBy.CREATED_AT: _created_at_key,
    SortBy.PRODUCT_COUNT: _product_count_key,
    SortBy.STATUS: _status_key,
}


def matches_search(category: Any, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return needle in (category.name or "").lower() or needle in (category.description or "").lower()


def matches_status(category: Any, status_filter: StatusFilter) -> bool:
    return status_filter is StatusFilter.ALL or category.status == status_filter.value


def matches_parent(category: Any, parent_filter: ParentFilter) -> bool:
    if parent_filter is ParentFilter.TOP_LEVEL:
        return category.parent_id is None
    if parent_filter is ParentFilter.SUBCATEGORIES:
        return category.parent_id is not None
    return True


def filter_categories(categories: Iterable[Any], state: ListState) -> List[Any]:
    """Apply the search, status and parent-type filters in that order."""

    filtered = [c for c in categories if matches_search(c, state.search_term)]
    filtered = [c for c in filtered if matches_status(c, state.status_filter)]
    return [c for c in filtered if matches_parent(c, state.parent_filter)]


def sort_categories(
    categories: Iterable[Any],
    sort_by: SortBy = SortBy.NAME,
    sort_order: SortOrder = SortOrder.ASC,
) -> List[Any]:
    """Stable sort; descending order keeps ties in their prior relative order."""

    key = SORT_KEYS[SortBy(sort_by)]
    return sorted(categories, key=key, reverse=SortOrder(sort_order) is SortOrder.DESC)


def paginate(items: Sequence[Any], page: int, page_size: int) -> List[Any]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def query_categories(categories: Iterable[Any], state: ListState) -> ListResult:
    matched = sort_categories(filter_categories(categories, state), state.sort_by, state.sort_order)
    return ListResult(
        items=paginate(matched, state.page, state.page_size),
        total_matched=len(matched),
        page=state.page,
        page_size=state.page_size,
    )
