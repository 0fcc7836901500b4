"""
Reference service - distinct dimension lists used to populate selectors.
"""
from sqlalchemy.orm import Session
from app.models.meter_reading import MeterReading
from app.utils.labels import strip_division_prefix
from typing import List, Dict, Any

INDUSTRY_LIST_LIMIT = 100


class ReferenceService:
    """Distinct-value projections over the readings table."""

    def __init__(self, db: Session):
        self.db = db

    def get_years(self) -> List[Dict[str, Any]]:
        """Financial years, most recent first."""
        rows = self.db.query(
            MeterReading.financial_year
        ).filter(
            MeterReading.financial_year.isnot(None)
        ).distinct().order_by(
            MeterReading.financial_year.desc()
        ).all()
        return [{"id": r[0], "name": r[0]} for r in rows]

    def get_divisions(self) -> List[Dict[str, Any]]:
        """Divisions keyed by their raw code, named without the scheme prefix."""
        rows = self.db.query(
            MeterReading.division_id
        ).distinct().order_by(MeterReading.division_id).all()
        return [
            {"id": r[0], "name": strip_division_prefix(r[0])}
            for r in rows
        ]

    def get_industries(self, limit: int = INDUSTRY_LIST_LIMIT) -> List[Dict[str, Any]]:
        """Industry names in alphabetical order."""
        rows = self.db.query(
            MeterReading.industryname
        ).distinct().order_by(MeterReading.industryname).limit(limit).all()
        return [{"id": r[0], "name": r[0]} for r in rows]

    def get_months(self) -> List[Dict[str, Any]]:
        """Month ids present in the data."""
        rows = self.db.query(
            MeterReading.month_id
        ).distinct().order_by(MeterReading.month_id).all()
        return [{"id": r[0], "name": f"Month {r[0]}"} for r in rows]
