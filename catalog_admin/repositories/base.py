"""Abstract category repository shared by the SQL and mock data sources."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..constants import DELETE_REASON_HAS_PRODUCTS, DELETE_REASON_HAS_SUBCATEGORIES
from ..errors import ConflictError
from ..records import CategoryPage, CategoryRecord, CategoryWithStats, DeleteCheck
from ..utils.category_stats import with_category_stats
from ..utils.category_tree import build_category_tree, flatten_category_tree


logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 100


class CategoryRepository(ABC):
    """Persistence for categories plus the product counts the dashboard needs.

    Listing methods return records ordered by ``sort_order`` then ``name``.
    Mutations receive payloads that :mod:`catalog_admin.services.category_service`
    has already validated.
    """

    @abstractmethod
    def list_all(self) -> List[CategoryRecord]:
        ...

    @abstractmethod
    def get_categories(self, query: Optional[Mapping[str, Any]] = None) -> CategoryPage:
        """Return one server-side page; ``query`` holds ``page``, ``limit`` and equality filters."""

    @abstractmethod
    def get_category(self, category_id: Any) -> CategoryRecord:
        ...

    @abstractmethod
    def get_subcategories(self, parent_id: Any) -> List[CategoryRecord]:
        ...

    @abstractmethod
    def count_products_by_category(self) -> Dict[Any, int]:
        ...

    @abstractmethod
    def create_category(self, payload: Mapping[str, Any]) -> CategoryRecord:
        ...

    @abstractmethod
    def update_category(self, category_id: Any, payload: Mapping[str, Any]) -> CategoryRecord:
        ...

    @abstractmethod
    def _delete_many(self, category_ids: List[Any]) -> None:
        """Delete the given ids, children before parents, as one unit."""

    def get_categories_with_stats(self) -> List[CategoryWithStats]:
        return with_category_stats(self.list_all(), self.count_products_by_category())

    def delete_category(self, category_id: Any) -> None:
        check = self.can_delete_category(category_id)
        if not check.can_delete:
            raise ConflictError(check.reason or "Category cannot be deleted")
        self._delete_many([category_id])
        logger.info("Deleted category %s", category_id)

    def can_delete_category(self, category_id: Any) -> DeleteCheck:
        self.get_category(category_id)
        if self.count_products_by_category().get(category_id, 0) > 0:
            return DeleteCheck(False, DELETE_REASON_HAS_PRODUCTS)
        if self.get_subcategories(category_id):
            return DeleteCheck(False, DELETE_REASON_HAS_SUBCATEGORIES)
        return DeleteCheck(True)

    def bulk_delete_categories(self, category_ids: Iterable[Any]) -> List[Any]:
        """Delete several categories at once, or none of them.

        A category may be deleted together with its subcategories when all of
        them are part of the same request. Returns the ids in deletion order.
        """

        ids = list(dict.fromkeys(category_ids))
        if not ids:
            return []
        requested = {category_id: self.get_category(category_id) for category_id in ids}
        product_counts = self.count_products_by_category()
        categories = self.list_all()

        for category_id, record in requested.items():
            if product_counts.get(category_id, 0) > 0:
                raise ConflictError(f"{record.name}: {DELETE_REASON_HAS_PRODUCTS}")
            children = [c.id for c in categories if c.parent_id == category_id]
            if any(child_id not in requested for child_id in children):
                raise ConflictError(f"{record.name}: {DELETE_REASON_HAS_SUBCATEGORIES}")

        levels = {
            node["category"].id: node["level"]
            for node in flatten_category_tree(build_category_tree(categories))
        }
        ordered = sorted(ids, key=lambda category_id: levels.get(category_id, 0), reverse=True)
        self._delete_many(ordered)
        logger.info("Bulk deleted %d categories", len(ordered))
        return ordered

    def name_exists(self, name: str, exclude_id: Optional[Any] = None) -> bool:
        wanted = name.strip().lower()
        return any(
            category.name.strip().lower() == wanted and category.id != exclude_id
            for category in self.list_all()
        )
