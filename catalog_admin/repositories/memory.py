"""In-memory category repository backing the ``mock`` data source."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..errors import NotFoundError
from ..records import CategoryPage, CategoryRecord
from .base import DEFAULT_PAGE_LIMIT, CategoryRepository


_FILTER_FIELDS = ("parent_id", "status")


def _ordering_key(category: CategoryRecord) -> tuple:
    return (category.sort_order, category.name)


class InMemoryCategoryRepository(CategoryRepository):
    def __init__(
        self,
        categories: Iterable[CategoryRecord] = (),
        product_counts: Optional[Mapping[Any, int]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._categories: Dict[Any, CategoryRecord] = {c.id: c for c in categories}
        self._product_counts: Dict[Any, int] = dict(product_counts or {})
        self._next_id = max((c.id for c in self._categories.values()), default=0) + 1

    def list_all(self) -> List[CategoryRecord]:
        with self._lock:
            return sorted(self._categories.values(), key=_ordering_key)

    def get_categories(self, query: Optional[Mapping[str, Any]] = None) -> CategoryPage:
        query = dict(query or {})
        page = max(int(query.pop("page", 1)), 1)
        limit = max(int(query.pop("limit", DEFAULT_PAGE_LIMIT)), 1)
        matched = [
            category
            for category in self.list_all()
            if all(
                getattr(category, name) == query[name]
                for name in _FILTER_FIELDS
                if name in query
            )
        ]
        start = (page - 1) * limit
        return CategoryPage(
            categories=matched[start:start + limit],
            page=page,
            limit=limit,
            total=len(matched),
        )

    def get_category(self, category_id: Any) -> CategoryRecord:
        with self._lock:
            try:
                return self._categories[category_id]
            except KeyError:
                raise NotFoundError(category_id) from None

    def get_subcategories(self, parent_id: Any) -> List[CategoryRecord]:
        self.get_category(parent_id)
        return [c for c in self.list_all() if c.parent_id == parent_id]

    def count_products_by_category(self) -> Dict[Any, int]:
        with self._lock:
            return {key: count for key, count in self._product_counts.items() if count}

    def set_product_count(self, category_id: Any, count: int) -> None:
        with self._lock:
            self._product_counts[category_id] = count

    def create_category(self, payload: Mapping[str, Any]) -> CategoryRecord:
        now = datetime.utcnow()
        with self._lock:
            record = CategoryRecord(
                id=self._next_id,
                name=payload["name"],
                description=payload.get("description"),
                parent_id=payload.get("parent_id"),
                status=payload.get("status") or "active",
                sort_order=payload.get("sort_order") or 0,
                slug=payload.get("slug"),
                created_at=now,
                updated_at=now,
            )
            self._categories[record.id] = record
            self._next_id += 1
            return record

    def update_category(self, category_id: Any, payload: Mapping[str, Any]) -> CategoryRecord:
        with self._lock:
            current = self.get_category(category_id)
            changes = {
                key: value
                for key, value in payload.items()
                if key in ("name", "description", "parent_id", "status", "sort_order", "slug")
            }
            record = replace(current, updated_at=datetime.utcnow(), **changes)
            self._categories[category_id] = record
            return record

    def _delete_many(self, category_ids: List[Any]) -> None:
        with self._lock:
            for category_id in category_ids:
                self.get_category(category_id)
            for category_id in category_ids:
                del self._categories[category_id]
                self._product_counts.pop(category_id, None)
