"""Category repository backed by Flask-SQLAlchemy."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..errors import NetworkError, NotFoundError
from ..extensions import db
from ..models import Category, Product
from ..records import CategoryPage, CategoryRecord
from .base import DEFAULT_PAGE_LIMIT, CategoryRepository


logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("name", "description", "parent_id", "status", "sort_order", "slug")


@contextmanager
def _guard(action: str) -> Iterator[None]:
    """Translate database failures into :class:`NetworkError` after a rollback."""

    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Category repository failed to %s", action)
        raise NetworkError(f"Failed to {action}", cause=exc) from exc


class SQLCategoryRepository(CategoryRepository):
    def list_all(self) -> List[CategoryRecord]:
        with _guard("load categories"):
            categories = Category.query.order_by(Category.sort_order, Category.name).all()
            return [CategoryRecord.from_model(category) for category in categories]

    def get_categories(self, query: Optional[Mapping[str, Any]] = None) -> CategoryPage:
        query = dict(query or {})
        page = max(int(query.pop("page", 1)), 1)
        limit = max(int(query.pop("limit", DEFAULT_PAGE_LIMIT)), 1)
        with _guard("load categories"):
            statement = Category.query
            if "parent_id" in query:
                parent_id = query["parent_id"]
                if parent_id is None:
                    statement = statement.filter(Category.parent_id.is_(None))
                else:
                    statement = statement.filter(Category.parent_id == parent_id)
            if "status" in query:
                statement = statement.filter(Category.status == query["status"])
            pagination = statement.order_by(Category.sort_order, Category.name).paginate(
                page=page, per_page=limit, error_out=False
            )
            return CategoryPage(
                categories=[CategoryRecord.from_model(item) for item in pagination.items],
                page=page,
                limit=limit,
                total=pagination.total or 0,
            )

    def get_category(self, category_id: Any) -> CategoryRecord:
        with _guard("load category"):
            category = db.session.get(Category, category_id)
        if category is None:
            raise NotFoundError(category_id)
        return CategoryRecord.from_model(category)

    def get_subcategories(self, parent_id: Any) -> List[CategoryRecord]:
        self.get_category(parent_id)
        with _guard("load subcategories"):
            children = (
                Category.query.filter_by(parent_id=parent_id)
                .order_by(Category.sort_order, Category.name)
                .all()
            )
            return [CategoryRecord.from_model(child) for child in children]

    def count_products_by_category(self) -> Dict[Any, int]:
        with _guard("count products"):
            rows = (
                db.session.query(Product.category_id, func.count(Product.id))
                .filter(Product.category_id.isnot(None))
                .group_by(Product.category_id)
                .all()
            )
        return {category_id: count for category_id, count in rows}

    def create_category(self, payload: Mapping[str, Any]) -> CategoryRecord:
        with _guard("create category"):
            category = Category(
                name=payload["name"],
                description=payload.get("description"),
                parent_id=payload.get("parent_id"),
                status=payload.get("status") or "active",
                sort_order=payload.get("sort_order") or 0,
                slug=payload.get("slug"),
            )
            db.session.add(category)
            db.session.commit()
            logger.info("Created category %s (%s)", category.id, category.name)
            return CategoryRecord.from_model(category)

    def update_category(self, category_id: Any, payload: Mapping[str, Any]) -> CategoryRecord:
        with _guard("update category"):
            category = db.session.get(Category, category_id)
            if category is None:
                raise NotFoundError(category_id)
            for field in _UPDATABLE_FIELDS:
                if field in payload:
                    setattr(category, field, payload[field])
            db.session.commit()
            return CategoryRecord.from_model(category)

    def _delete_many(self, category_ids: List[Any]) -> None:
        with _guard("delete categories"):
            for category_id in category_ids:
                category = db.session.get(Category, category_id)
                if category is None:
                    db.session.rollback()
                    raise NotFoundError(category_id)
                db.session.delete(category)
                # Flush per row so children go before their parents.
                db.session.flush()
            db.session.commit()
