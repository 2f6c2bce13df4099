"""Helpers for working with category hierarchies."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, TypedDict

from ..records import CategoryRecord


logger = logging.getLogger(__name__)


class CategoryNode(TypedDict):
    """Represents a node in a category tree."""

    category: CategoryRecord
    level: int
    children: List["CategoryNode"]
    has_children: bool


def build_category_tree(categories: Iterable[CategoryRecord]) -> List[CategoryNode]:
    """Build a forest from a flat list of categories.

    Roots and siblings keep the order of ``categories``. A category whose
    ``parent_id`` does not resolve, points at itself, or would close a cycle
    is promoted to a root instead of being dropped, so every input category
    appears exactly once in the result.
    """

    categories = list(categories)
    nodes: Dict[Any, CategoryNode] = {}
    for category in categories:
        nodes[category.id] = {
            "category": category,
            "level": 0,
            "children": [],
            "has_children": False,
        }

    roots: List[CategoryNode] = []
    attached_to: Dict[Any, Any] = {}

    for category in categories:
        node = nodes[category.id]
        parent_id = category.parent_id
        if parent_id is not None and parent_id in nodes:
            if _closes_cycle(category.id, parent_id, attached_to):
                logger.warning(
                    "Category %s has a cyclic parent link to %s; treating it as a root",
                    category.id,
                    parent_id,
                )
                roots.append(node)
                continue
            parent = nodes[parent_id]
            parent["children"].append(node)
            parent["has_children"] = True
            attached_to[category.id] = parent_id
        else:
            if parent_id is not None:
                logger.warning(
                    "Category %s references missing parent %s; treating it as a root",
                    category.id,
                    parent_id,
                )
            roots.append(node)

    _assign_levels(roots)
    return roots


def flatten_category_tree(nodes: Iterable[CategoryNode]) -> List[CategoryNode]:
    """Return the nodes in depth-first preorder for list rendering."""

    flattened: List[CategoryNode] = []
    stack: List[CategoryNode] = list(reversed(list(nodes)))
    while stack:
        node = stack.pop()
        flattened.append(node)
        stack.extend(reversed(node["children"]))
    return flattened


def collect_subtree_ids(nodes: Sequence[CategoryNode], target_id: Any) -> Set[Any]:
    """Return ``target_id`` and the ids of all of its descendants."""

    for node in flatten_category_tree(nodes):
        if node["category"].id == target_id:
            return {item["category"].id for item in flatten_category_tree([node])}
    return {target_id}


def filter_category_tree(
    nodes: Sequence[CategoryNode], excluded_ids: Set[Any]
) -> List[CategoryNode]:
    """Copy the forest without the nodes in ``excluded_ids`` (and their subtrees)."""

    filtered: List[CategoryNode] = []
    for node in nodes:
        if node["category"].id in excluded_ids:
            continue
        children = filter_category_tree(node["children"], excluded_ids)
        filtered.append(
            {
                "category": node["category"],
                "level": node["level"],
                "children": children,
                "has_children": bool(children),
            }
        )
    return filtered


def format_category_tree(nodes: Sequence[CategoryNode], indent: str = "  ") -> List[str]:
    return [
        f"{indent * node['level']}{node['category'].name}"
        for node in flatten_category_tree(nodes)
    ]


def _closes_cycle(category_id: Any, parent_id: Any, attached_to: Dict[Any, Any]) -> bool:
    cursor: Optional[Any] = parent_id
    while cursor is not None:
        if cursor == category_id:
            return True
        cursor = attached_to.get(cursor)
    return False


def _assign_levels(roots: List[CategoryNode]) -> None:
    stack = [(root, 0) for root in roots]
    while stack:
        node, level = stack.pop()
        node["level"] = level
        stack.extend((child, level + 1) for child in node["children"])
