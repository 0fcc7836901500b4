"""
Meter reading Pydantic schemas for raw listings.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class MeterReadingRecord(BaseModel):
    """Single meter reading row."""
    industryname: str
    division_id: str
    industry_id: Optional[str] = None
    month_id: int
    monthname: Optional[str] = None
    financial_year: Optional[str] = None
    initialmeter_reading: Optional[float] = None
    finalmeter_reading: Optional[float] = None
    meterreadingdifference: Optional[str] = None
    currentfinancialyear: Optional[str] = None
    insert_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaginatedMeterData(BaseModel):
    """A page of readings with its pagination metadata."""
    data: List[MeterReadingRecord]
    total: int
    page: int
    pageSize: int
    hasMore: bool
    totalPages: int
    currentPageRecords: int = 0
