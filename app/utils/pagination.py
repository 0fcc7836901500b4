"""
Offset/limit pagination helpers for the raw data listing.
"""
import math
from typing import Any, Dict, List, Optional, Tuple

from app.config import settings


def _parse_int(value: Optional[Any]) -> Optional[int]:
    """Parse an integer query value, returning None when it is not numeric."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def parse_page_params(
    page: Optional[Any],
    page_size: Optional[Any],
    default_page_size: Optional[int] = None,
    max_page_size: Optional[int] = None
) -> Tuple[int, int]:
    """
    Parse raw ``page`` / ``pageSize`` query values defensively.

    Missing or non-numeric values fall back to page 0 and the default page
    size instead of failing the request. A negative page is clamped to 0,
    a non-positive page size falls back to the default, and page sizes
    above the configured maximum are capped.

    Returns:
        Tuple of (page, page_size)
    """
    if default_page_size is None:
        default_page_size = settings.DEFAULT_PAGE_SIZE
    if max_page_size is None:
        max_page_size = settings.MAX_PAGE_SIZE

    parsed_page = _parse_int(page)
    if parsed_page is None or parsed_page < 0:
        parsed_page = 0

    parsed_size = _parse_int(page_size)
    if parsed_size is None or parsed_size <= 0:
        parsed_size = default_page_size

    return parsed_page, min(parsed_size, max_page_size)


def page_offset(page: int, page_size: int) -> int:
    """Number of rows to skip before the requested page."""
    return page * page_size


def total_pages(total: int, page_size: int) -> int:
    """Pages needed to show ``total`` rows."""
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


def has_more(page: int, page_size: int, total: int) -> bool:
    """True while rows remain after the given page."""
    return (page + 1) * page_size < total


def build_page(rows: List[Any], total: int, page: int, page_size: int) -> Dict[str, Any]:
    """Wrap a page of rows with its pagination metadata."""
    return {
        "data": rows,
        "total": total,
        "page": page,
        "pageSize": page_size,
        "hasMore": has_more(page, page_size, total),
        "totalPages": total_pages(total, page_size),
        "currentPageRecords": len(rows),
    }
