"""
Meter data service - raw listings, statistics and connectivity checks.
"""
from sqlalchemy.orm import Session
from sqlalchemy import func, cast, Numeric, text
from app.models.meter_reading import MeterReading
from app.utils.aggregators import to_number
from app.utils.pagination import page_offset
from typing import List, Dict, Any

LEGACY_LISTING_LIMIT = 100

# Columns returned by the raw listings, in display order
LISTING_COLUMNS = (
    "industryname",
    "division_id",
    "industry_id",
    "month_id",
    "monthname",
    "financial_year",
    "initialmeter_reading",
    "finalmeter_reading",
    "meterreadingdifference",
    "currentfinancialyear",
    "insert_date",
)


def reading_to_dict(reading: MeterReading) -> Dict[str, Any]:
    """Serialize a reading for the raw listing endpoints."""
    data = {column: getattr(reading, column) for column in LISTING_COLUMNS}
    for column in ("initialmeter_reading", "finalmeter_reading"):
        if data[column] is not None:
            data[column] = float(data[column])
    return data


class MeterDataService:
    """Raw reading access and whole-table statistics."""

    def __init__(self, db: Session):
        self.db = db

    def _listing_query(self):
        return self.db.query(MeterReading).order_by(
            MeterReading.division_id,
            MeterReading.month_id,
            MeterReading.industryname,
            MeterReading.financial_year,
            MeterReading.id
        )

    def count_readings(self) -> int:
        """Total number of rows in the table."""
        return self.db.query(func.count(MeterReading.id)).scalar() or 0

    def get_page(self, page: int, page_size: int) -> List[Dict[str, Any]]:
        """Rows ``[page*page_size, page*page_size + page_size)`` of the listing order."""
        readings = self._listing_query().offset(
            page_offset(page, page_size)
        ).limit(page_size).all()
        return [reading_to_dict(r) for r in readings]

    def get_recent_sample(self, limit: int = LEGACY_LISTING_LIMIT) -> List[Dict[str, Any]]:
        """First rows of the listing order, unpaginated."""
        return [reading_to_dict(r) for r in self._listing_query().limit(limit).all()]

    def get_stats(self) -> Dict[str, Any]:
        """
        Whole-table statistics.

        Each metric is a separate aggregate query; an empty table reports
        zeros throughout.
        """
        queries = {
            "total_records": func.count(MeterReading.id),
            "unique_industries": func.count(func.distinct(MeterReading.industryname)),
            "unique_divisions": func.count(func.distinct(MeterReading.division_id)),
            "unique_months": func.count(func.distinct(MeterReading.month_id)),
        }

        stats: Dict[str, Any] = {}
        for name, expression in queries.items():
            stats[name] = int(self.db.query(expression).scalar() or 0)

        total_difference = self.db.query(
            func.sum(cast(MeterReading.meterreadingdifference, Numeric))
        ).scalar()
        stats["total_difference"] = to_number(total_difference)

        return stats

    def check_connection(self) -> Dict[str, Any]:
        """Round-trip to the database returning its clock and version."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            statement = text("SELECT NOW() AS server_time, version() AS db_version")
        else:
            statement = text("SELECT CURRENT_TIMESTAMP AS server_time, sqlite_version() AS db_version")

        row = self.db.execute(statement).one()
        return {
            "status": "Database connection successful",
            "current_time": row.server_time,
            "database_version": row.db_version,
        }
