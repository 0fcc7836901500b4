"""
Utils package initialization.
"""
from app.utils.pagination import (
    parse_page_params,
    page_offset,
    total_pages,
    has_more,
    build_page,
)
from app.utils.labels import (
    strip_division_prefix,
    division_chart_label,
    month_label,
)
from app.utils.filters import is_all_years
from app.utils.aggregators import (
    to_number,
    aggregate_monthly_average,
    sort_series,
)

__all__ = [
    "parse_page_params",
    "page_offset",
    "total_pages",
    "has_more",
    "build_page",
    "strip_division_prefix",
    "division_chart_label",
    "month_label",
    "is_all_years",
    "to_number",
    "aggregate_monthly_average",
    "sort_series",
]
