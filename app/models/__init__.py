"""
Models package initialization.
"""
from app.models.meter_reading import MeterReading

__all__ = ["MeterReading"]
