"""
Common Pydantic schemas shared across endpoints.
"""
from pydantic import BaseModel
from typing import Optional, Union, Any
from datetime import datetime


class DropdownOption(BaseModel):
    """Entry of a selector list: raw value plus display name."""
    id: Union[int, str]
    name: str


class HealthResponse(BaseModel):
    """Liveness probe response."""
    status: str
    timestamp: datetime
    message: str
    database: str


class DbTestResponse(BaseModel):
    """Database connectivity diagnostic response."""
    status: str
    current_time: Any
    database_version: Optional[str] = None


class StatsResponse(BaseModel):
    """Whole-table statistics."""
    total_records: int = 0
    unique_industries: int = 0
    unique_divisions: int = 0
    unique_months: int = 0
    total_difference: float = 0.0

