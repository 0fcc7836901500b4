"""
Routers package initialization.
"""
from app.routers import reference
from app.routers import charts
from app.routers import meter_data

__all__ = [
    "reference",
    "charts",
    "meter_data",
]
