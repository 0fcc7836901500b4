"""
Services package initialization.
"""
from app.services.reference_service import ReferenceService
from app.services.chart_service import ChartService
from app.services.meter_data_service import MeterDataService

__all__ = [
    "ReferenceService",
    "ChartService",
    "MeterDataService",
]
