"""
Chart Pydantic schemas - one row type per chart endpoint.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class IndustryTotal(BaseModel):
    """Industry ranking row (chart 1)."""
    industryname: str
    total_diff: float


class DivisionTotal(BaseModel):
    """Per-division total (chart 2)."""
    division_id: str
    total_diff: float


class YearTotal(BaseModel):
    """Per-financial-year total (chart 3)."""
    financial_year: Optional[str] = None
    total_diff: float


class TimeSeriesPoint(BaseModel):
    """Dated total for an industry (chart 4)."""
    month_id: int
    total_diff: float
    industry_id: Optional[str] = None
    insert_date: Optional[datetime] = None


class MonthlyTotal(BaseModel):
    """Per-month total (charts 5 and 6)."""
    month_id: int
    monthname: Optional[str] = None
    total_diff: float
