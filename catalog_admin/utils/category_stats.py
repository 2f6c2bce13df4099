"""Derived category counts and dashboard totals."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict
from typing import Any, Iterable, List, Mapping, TypedDict

from ..records import CategoryRecord, CategoryWithStats


class CategoryDashboardStats(TypedDict):
    total: int
    active: int
    inactive: int
    top_level: int
    with_products: int


def with_category_stats(
    categories: Iterable[CategoryRecord],
    products_by_category_id: Mapping[Any, int],
) -> List[CategoryWithStats]:
    """Attach ``product_count`` and ``subcategory_count`` to each category.

    ``products_by_category_id`` comes from the product repository and maps a
    category id to the number of products filed under it. Subcategory counts
    only include direct children.
    """

    categories = list(categories)
    children_per_parent = Counter(
        category.parent_id for category in categories if category.parent_id is not None
    )
    enriched: List[CategoryWithStats] = []
    for category in categories:
        fields = asdict(category)
        fields.pop("product_count", None)
        fields.pop("subcategory_count", None)
        enriched.append(
            CategoryWithStats(
                **fields,
                product_count=products_by_category_id.get(category.id, 0),
                subcategory_count=children_per_parent.get(category.id, 0),
            )
        )
    return enriched


def dashboard_stats(categories: Iterable[Any]) -> CategoryDashboardStats:
    stats: CategoryDashboardStats = {
        "total": 0,
        "active": 0,
        "inactive": 0,
        "top_level": 0,
        "with_products": 0,
    }
    for category in categories:
        stats["total"] += 1
        status = getattr(category, "status", None)
        if status == "active":
            stats["active"] += 1
        elif status == "inactive":
            stats["inactive"] += 1
        if getattr(category, "parent_id", None) is None:
            stats["top_level"] += 1
        if (getattr(category, "product_count", None) or 0) > 0:
            stats["with_products"] += 1
    return stats
