"""Pagination utilities shared across the category views."""
from __future__ import annotations

import math
from typing import List

from flask import Request, request, session

PER_PAGE_OPTIONS: tuple[int, ...] = (10, 20, 50, 100, 200)
DEFAULT_PER_PAGE: int = 20


def _resolve_per_page(per_page: int) -> int:
    """Return a safe per-page value limited to the configured options."""

    if per_page in PER_PAGE_OPTIONS:
        return per_page
    return DEFAULT_PER_PAGE


def get_page_args(req: Request | None = None) -> tuple[int, int]:
    """Return sanitized pagination arguments from the given request.

    The page number is clamped to 1 and the per-page value is restricted to
    the allowed options to avoid accidentally requesting huge page sizes. The
    last explicit per-page choice is remembered in the session.
    """

    req = req or request
    page = req.args.get("page", 1, type=int)
    per_page_arg = req.args.get("per_page", type=int)
    if per_page_arg is not None:
        per_page = _resolve_per_page(per_page_arg)
        session["pagination_per_page"] = per_page
    else:
        per_page = session.get("pagination_per_page", DEFAULT_PER_PAGE)
        per_page = _resolve_per_page(per_page)
    page = max(page, 1)
    return page, per_page


def total_pages(total: int, per_page: int) -> int:
    return math.ceil(total / per_page) if per_page > 0 else 0


def build_pagination_links(current_page: int, pages: int) -> List[int | None]:
    """Generate a compact list of page numbers (with gaps) for navigation."""

    total = pages or 1
    current = current_page or 1

    if total <= 1:
        return [1]

    block_start = max(min(current - 1, total - 2), 1)
    block_end = min(block_start + 2, total)

    numbers = {1, total}
    numbers.update(range(block_start, block_end + 1))

    result: List[int | None] = []
    last_number: int | None = None
    for number in sorted(numbers):
        if last_number is not None and number - last_number > 1:
            result.append(None)
        result.append(number)
        last_number = number
    return result
