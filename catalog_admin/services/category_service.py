"""Category use cases: listing, tree, statistics and validated mutations."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..constants import (
    CATEGORY_STATUSES,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
)
from ..errors import ConflictError, ValidationError
from ..records import CategoryRecord, DeleteCheck
from ..repositories.base import CategoryRepository
from ..utils.category_list import ListResult, ListState, query_categories
from ..utils.category_stats import CategoryDashboardStats, dashboard_stats
from ..utils.category_tree import (
    CategoryNode,
    build_category_tree,
    collect_subtree_ids,
    filter_category_tree,
    flatten_category_tree,
)


logger = logging.getLogger(__name__)

# The admin client sends camelCase keys; both spellings are accepted.
_FIELD_ALIASES = {
    "parentId": "parent_id",
    "sortOrder": "sort_order",
}


def make_slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "category"


def _normalize_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {_FIELD_ALIASES.get(key, key): value for key, value in payload.items()}


def validate_category_payload(payload: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """Return a cleaned copy of ``payload`` or raise :class:`ValidationError`.

    With ``partial`` set only the fields present are checked, as for updates.
    Errors are collected per field so the form can show all of them at once.
    """

    if not isinstance(payload, Mapping):
        raise ValidationError({"payload": "Category data must be an object"})

    data = _normalize_keys(payload)
    cleaned: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    if "name" in data or not partial:
        name = data.get("name") or ""
        if not isinstance(name, str):
            errors["name"] = "Category name must be text"
        elif not name.strip():
            errors["name"] = "Category name is required"
        elif not NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH:
            errors["name"] = (
                f"Category name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        else:
            cleaned["name"] = name.strip()

    if "description" in data:
        description = data.get("description") or ""
        if not isinstance(description, str):
            errors["description"] = "Description must be text"
        elif len(description.strip()) > DESCRIPTION_MAX_LENGTH:
            errors["description"] = (
                f"Description must be {DESCRIPTION_MAX_LENGTH} characters or fewer"
            )
        else:
            cleaned["description"] = description.strip() or None

    if "status" in data:
        status = data.get("status")
        if status not in CATEGORY_STATUSES:
            errors["status"] = "Status must be active or inactive"
        else:
            cleaned["status"] = status

    if "sort_order" in data:
        try:
            sort_order = int(data.get("sort_order") or 0)
        except (TypeError, ValueError):
            errors["sort_order"] = "Sort order must be a number"
        else:
            if sort_order < 0:
                errors["sort_order"] = "Sort order cannot be negative"
            else:
                cleaned["sort_order"] = sort_order

    if "parent_id" in data:
        parent_id = data.get("parent_id")
        if parent_id in (None, ""):
            cleaned["parent_id"] = None
        else:
            try:
                cleaned["parent_id"] = int(parent_id)
            except (TypeError, ValueError):
                errors["parent_id"] = "Parent category is invalid"

    if "slug" in data and data.get("slug"):
        cleaned["slug"] = make_slug(str(data["slug"]))

    if errors:
        raise ValidationError(errors)
    return cleaned


class CategoryService:
    def __init__(self, repository: CategoryRepository) -> None:
        self.repository = repository

    def list_categories(self, state: ListState) -> ListResult:
        return query_categories(self.repository.get_categories_with_stats(), state)

    def category_tree(self) -> List[CategoryNode]:
        return build_category_tree(self.repository.get_categories_with_stats())

    def flattened_tree(self) -> List[CategoryNode]:
        return flatten_category_tree(self.category_tree())

    def dashboard_stats(self) -> CategoryDashboardStats:
        return dashboard_stats(self.repository.get_categories_with_stats())

    def parent_options(self, category_id: Any) -> List[CategoryNode]:
        """Categories that ``category_id`` may be moved under (its own subtree excluded)."""

        self.repository.get_category(category_id)
        tree = build_category_tree(self.repository.list_all())
        excluded = collect_subtree_ids(tree, category_id)
        return flatten_category_tree(filter_category_tree(tree, excluded))

    def create_category(self, payload: Mapping[str, Any]) -> CategoryRecord:
        cleaned = validate_category_payload(payload)
        self._check_parent(None, cleaned.get("parent_id"))
        if self.repository.name_exists(cleaned["name"]):
            raise ConflictError("Category name already exists")
        cleaned.setdefault("slug", make_slug(cleaned["name"]))
        category = self.repository.create_category(cleaned)
        logger.info("Category %s created", category.id)
        return category

    def update_category(self, category_id: Any, payload: Mapping[str, Any]) -> CategoryRecord:
        current = self.repository.get_category(category_id)
        cleaned = validate_category_payload(payload, partial=True)
        if "parent_id" in cleaned:
            self._check_parent(current.id, cleaned["parent_id"])
        if "name" in cleaned and cleaned["name"] != current.name:
            if self.repository.name_exists(cleaned["name"], exclude_id=current.id):
                raise ConflictError("Category name already exists")
        category = self.repository.update_category(category_id, cleaned)
        logger.info("Category %s updated", category_id)
        return category

    def update_sort_order(self, category_id: Any, sort_order: Any) -> CategoryRecord:
        if sort_order is None:
            raise ValidationError({"sort_order": "Sort order is required"})
        return self.update_category(category_id, {"sort_order": sort_order})

    def can_delete_category(self, category_id: Any) -> DeleteCheck:
        return self.repository.can_delete_category(category_id)

    def delete_category(self, category_id: Any) -> None:
        check = self.repository.can_delete_category(category_id)
        if not check.can_delete:
            raise ConflictError(check.reason or "Category cannot be deleted")
        self.repository.delete_category(category_id)

    def bulk_delete_categories(self, category_ids: Iterable[Any]) -> List[Any]:
        return self.repository.bulk_delete_categories(category_ids)

    def _check_parent(self, category_id: Optional[Any], parent_id: Optional[Any]) -> None:
        """Reject parent links that would leave the categories without a valid forest."""

        if parent_id is None:
            return
        if category_id is not None and parent_id == category_id:
            raise ValidationError({"parent_id": "Category cannot be its own parent"})
        categories = self.repository.list_all()
        if all(category.id != parent_id for category in categories):
            raise ValidationError({"parent_id": "Parent category not found"})
        if category_id is not None:
            subtree = collect_subtree_ids(build_category_tree(categories), category_id)
            if parent_id in subtree:
                raise ValidationError(
                    {"parent_id": "Category cannot be moved under one of its subcategories"}
                )
