"""
Chart service - grouped sums of meter reading differences.
"""
from sqlalchemy.orm import Session
from sqlalchemy import func, cast, Numeric
from app.models.meter_reading import MeterReading
from app.utils.aggregators import to_number
from app.utils.filters import is_all_years
from typing import List, Dict, Any, Optional

TOP_INDUSTRIES_LIMIT = 50
TIME_SERIES_LIMIT = 50


def total_diff_expr():
    """SUM(CAST(meterreadingdifference AS NUMERIC)) labelled total_diff."""
    return func.sum(
        cast(MeterReading.meterreadingdifference, Numeric)
    ).label('total_diff')


class ChartService:
    """Aggregations backing the six dashboard charts."""

    def __init__(self, db: Session):
        self.db = db

    def industry_ranking(self, division: str, financial_year: str) -> List[Dict[str, Any]]:
        """
        Industries in a division and year, ranked by total difference.

        Returns at most 50 rows, largest total first.
        """
        total_diff = total_diff_expr()
        rows = self.db.query(
            MeterReading.industryname,
            total_diff
        ).filter(
            MeterReading.division_id == division,
            MeterReading.financial_year == financial_year
        ).group_by(
            MeterReading.industryname
        ).order_by(
            total_diff.desc()
        ).limit(TOP_INDUSTRIES_LIMIT).all()

        return [
            {"industryname": r.industryname, "total_diff": to_number(r.total_diff)}
            for r in rows
        ]

    def division_totals(self, financial_year: str) -> List[Dict[str, Any]]:
        """Total difference per division for one year, by division code."""
        rows = self.db.query(
            MeterReading.division_id,
            total_diff_expr()
        ).filter(
            MeterReading.financial_year == financial_year
        ).group_by(
            MeterReading.division_id
        ).order_by(MeterReading.division_id).all()

        return [
            {"division_id": r.division_id, "total_diff": to_number(r.total_diff)}
            for r in rows
        ]

    def yearly_totals(self, industry: str) -> List[Dict[str, Any]]:
        """Total difference per financial year for one industry."""
        rows = self.db.query(
            MeterReading.financial_year,
            total_diff_expr()
        ).filter(
            MeterReading.industryname == industry
        ).group_by(
            MeterReading.financial_year
        ).order_by(MeterReading.financial_year).all()

        return [
            {"financial_year": r.financial_year, "total_diff": to_number(r.total_diff)}
            for r in rows
        ]

    def industry_time_series(self, industry: str) -> List[Dict[str, Any]]:
        """Dated totals for one industry, ordered by month then insert date."""
        rows = self.db.query(
            MeterReading.month_id,
            total_diff_expr(),
            MeterReading.industry_id,
            MeterReading.insert_date
        ).filter(
            MeterReading.industryname == industry
        ).group_by(
            MeterReading.month_id,
            MeterReading.industry_id,
            MeterReading.insert_date
        ).order_by(
            MeterReading.month_id,
            MeterReading.insert_date
        ).limit(TIME_SERIES_LIMIT).all()

        return [
            {
                "month_id": r.month_id,
                "total_diff": to_number(r.total_diff),
                "industry_id": r.industry_id,
                "insert_date": r.insert_date,
            }
            for r in rows
        ]

    def industry_monthly(
        self,
        industry: str,
        financial_year: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Monthly totals for an industry.

        An empty or ``all`` year means every financial year is included.
        """
        query = self.db.query(
            MeterReading.month_id,
            MeterReading.monthname,
            total_diff_expr()
        ).filter(
            MeterReading.industryname == industry,
            MeterReading.monthname.isnot(None)
        )

        if not is_all_years(financial_year):
            query = query.filter(MeterReading.financial_year == financial_year)

        rows = query.group_by(
            MeterReading.month_id,
            MeterReading.monthname
        ).order_by(MeterReading.month_id).all()

        return [self._monthly_row(r) for r in rows]

    def division_monthly(self, division: str, financial_year: str) -> List[Dict[str, Any]]:
        """Monthly totals for a division in one financial year."""
        rows = self.db.query(
            MeterReading.month_id,
            MeterReading.monthname,
            total_diff_expr()
        ).filter(
            MeterReading.division_id == division,
            MeterReading.financial_year == financial_year,
            MeterReading.monthname.isnot(None)
        ).group_by(
            MeterReading.month_id,
            MeterReading.monthname
        ).order_by(MeterReading.month_id).all()

        return [self._monthly_row(r) for r in rows]

    @staticmethod
    def _monthly_row(r) -> Dict[str, Any]:
        return {
            "month_id": r.month_id,
            "monthname": r.monthname,
            "total_diff": to_number(r.total_diff),
        }
