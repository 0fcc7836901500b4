"""
Schemas package initialization.
"""
from app.schemas.common import (
    DropdownOption,
    HealthResponse,
    DbTestResponse,
    StatsResponse,
)
from app.schemas.meter_reading import (
    MeterReadingRecord,
    PaginatedMeterData,
)
from app.schemas.chart import (
    IndustryTotal,
    DivisionTotal,
    YearTotal,
    TimeSeriesPoint,
    MonthlyTotal,
)

__all__ = [
    # Common
    "DropdownOption",
    "HealthResponse",
    "DbTestResponse",
    "StatsResponse",
    # Meter readings
    "MeterReadingRecord",
    "PaginatedMeterData",
    # Charts
    "IndustryTotal",
    "DivisionTotal",
    "YearTotal",
    "TimeSeriesPoint",
    "MonthlyTotal",
]
