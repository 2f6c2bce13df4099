"""Plain category records handed from repositories to the category core.

Repositories convert whatever they persist into these immutable snapshots so
the tree, stats and list helpers never touch a database session.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .utils.pagination import total_pages as count_pages


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    status: str = "active"
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    slug: Optional[str] = None

    @classmethod
    def from_model(cls, category: Any) -> "CategoryRecord":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            parent_id=category.parent_id,
            status=category.status,
            sort_order=category.sort_order or 0,
            created_at=category.created_at,
            updated_at=category.updated_at,
            slug=category.slug,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("created_at", "updated_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


@dataclass(frozen=True)
class CategoryWithStats(CategoryRecord):
    product_count: int = 0
    subcategory_count: int = 0


@dataclass(frozen=True)
class DeleteCheck:
    can_delete: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"can_delete": self.can_delete}
        if self.reason:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class CategoryPage:
    """A server-side page of categories plus its pagination metadata."""

    categories: List[CategoryRecord]
    page: int
    limit: int
    total: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        pages = count_pages(self.total, self.limit)
        object.__setattr__(self, "total_pages", pages)

    @property
    def pagination(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }
