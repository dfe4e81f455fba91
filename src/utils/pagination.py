"""Offset pagination helpers."""

import math
import re
from dataclasses import dataclass
from typing import Any

from src.config import DEFAULT_PER_PAGE, MAX_DB_INT, MAX_PER_PAGE

_INTEGER = re.compile(r"-?[0-9]+")


@dataclass(frozen=True)
class PageRequest:
    page: int
    per_page: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page


def parse_int(value: Any) -> int | None:
    """Parse an untrusted scalar into an int within the INTEGER column range, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not _INTEGER.fullmatch(text):
            return None
        number = int(text)
    if not -MAX_DB_INT <= number <= MAX_DB_INT:
        return None
    return number


def parse_positive_int(value: Any) -> int | None:
    number = parse_int(value)
    if number is None or number < 1:
        return None
    return number


def normalize_pagination(page: Any = None, per_page: Any = None) -> PageRequest:
    """Coerce raw page/perPage values, falling back to defaults when out of range."""
    page_number = parse_positive_int(page) or 1

    size = parse_int(per_page)
    if size is None or size < 1 or size > MAX_PER_PAGE:
        size = DEFAULT_PER_PAGE

    return PageRequest(page=page_number, per_page=size)


def format_pagination_response(items: list, total_items: int, current_page: int, per_page: int) -> dict[str, Any]:
    """
    Wrap a page of items with pagination metadata.

    Args:
        items: Items on the current page
        total_items: Number of items matching the query across all pages
        current_page: 1-based page number
        per_page: Page size

    Returns:
        Dict with ``data`` and ``pagination`` keys
    """
    total_pages = math.ceil(total_items / per_page) if total_items > 0 else 0

    return {
        "data": items,
        "pagination": {
            "currentPage": current_page,
            "perPage": per_page,
            "totalItems": total_items,
            "totalPages": total_pages,
            "hasNext": current_page < total_pages,
            "hasPrev": current_page > 1,
        },
    }
