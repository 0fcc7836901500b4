"""
Query filter helpers shared by the API and its clients.
"""
from typing import Optional

# Values of financial_year that mean "every year"
ALL_YEARS_SENTINELS = ("", "all")


def is_all_years(financial_year: Optional[str]) -> bool:
    """True when the year filter should not restrict results."""
    return financial_year is None or financial_year.strip().lower() in ALL_YEARS_SENTINELS
