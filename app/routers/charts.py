"""
Chart API endpoints.

Every chart sums CAST(meterreadingdifference AS NUMERIC) as ``total_diff``
grouped by one dimension. Row order is part of the contract: clients only
re-sort when the user asks for it.
"""
import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.database import get_db
from app.exceptions import MissingParameter, QueryFailure
from app.schemas.chart import (
    IndustryTotal,
    DivisionTotal,
    YearTotal,
    TimeSeriesPoint,
    MonthlyTotal,
)
from app.services.chart_service import ChartService
from app.utils.filters import is_all_years
from typing import Optional, List

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/chart1", response_model=List[IndustryTotal])
def get_industry_ranking(
    division: Optional[str] = Query(None, description="Division code, e.g. EE_Adava"),
    financial_year: Optional[str] = Query(None, description="Financial year, e.g. 2023-24"),
    db: Session = Depends(get_db)
):
    """
    Industry vs meter reading difference for a division and year.

    Top 50 industries, largest total first.
    """
    if not division or not financial_year:
        logger.warning("Chart1: Missing required parameters")
        raise MissingParameter(["division", "financial_year"])

    try:
        rows = ChartService(db).industry_ranking(division, financial_year)
    except SQLAlchemyError as e:
        logger.error(f"Chart 1 error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Chart1: {len(rows)} industries for division '{division}', year '{financial_year}'")
    return rows


@router.get("/chart2", response_model=List[DivisionTotal])
def get_division_totals(
    financial_year: Optional[str] = Query(None, description="Financial year"),
    db: Session = Depends(get_db)
):
    """Division vs meter reading difference for a year, by division code."""
    if not financial_year:
        logger.warning("Chart2: Missing required parameter")
        raise MissingParameter(["financial_year"])

    try:
        rows = ChartService(db).division_totals(financial_year)
    except SQLAlchemyError as e:
        logger.error(f"Chart 2 error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Chart2: {len(rows)} divisions for year '{financial_year}'")
    return rows


@router.get("/chart3", response_model=List[YearTotal])
def get_yearly_totals(
    industry: Optional[str] = Query(None, description="Industry name"),
    db: Session = Depends(get_db)
):
    """Financial year vs meter reading difference for an industry."""
    if not industry:
        logger.warning("Chart3: Missing required parameter")
        raise MissingParameter(["industry"])

    try:
        rows = ChartService(db).yearly_totals(industry)
    except SQLAlchemyError as e:
        logger.error(f"Chart 3 error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Chart3: {len(rows)} years for industry '{industry}'")
    return rows


@router.get("/chart4", response_model=List[TimeSeriesPoint])
def get_industry_time_series(
    industry: Optional[str] = Query(None, description="Industry name"),
    db: Session = Depends(get_db)
):
    """Time series of totals for an industry (at most 50 points)."""
    if not industry:
        logger.warning("Chart4: Missing required parameter")
        raise MissingParameter(["industry"])

    try:
        rows = ChartService(db).industry_time_series(industry)
    except SQLAlchemyError as e:
        logger.error(f"Chart 4 error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Chart4: {len(rows)} data points for industry '{industry}'")
    return rows


@router.get("/chart5", response_model=List[MonthlyTotal])
def get_industry_monthly(
    industry: Optional[str] = Query(None, description="Industry name"),
    financial_year: Optional[str] = Query(None, description="Financial year, empty or 'all' for every year"),
    db: Session = Depends(get_db)
):
    """Monthly totals for an industry, optionally restricted to one year."""
    if not industry:
        logger.warning("Chart5: Missing required parameter - industry")
        raise MissingParameter(
            ["industry"],
            received={"industry": industry, "financial_year": financial_year}
        )

    try:
        rows = ChartService(db).industry_monthly(industry, financial_year)
    except SQLAlchemyError as e:
        logger.error(f"Chart 5 error: {e}")
        raise QueryFailure.wrap(e)

    scope = "all years" if is_all_years(financial_year) else f"year '{financial_year}'"
    logger.info(f"Chart5: {len(rows)} months for industry '{industry}' ({scope})")
    return rows


@router.get("/chart6", response_model=List[MonthlyTotal])
def get_division_monthly(
    division: Optional[str] = Query(None, description="Division code"),
    financial_year: Optional[str] = Query(None, description="Financial year"),
    db: Session = Depends(get_db)
):
    """Monthly totals for a division in one year."""
    if not division or not financial_year:
        logger.warning("Chart6: Missing required parameters")
        raise MissingParameter(["division", "financial_year"])

    try:
        rows = ChartService(db).division_monthly(division, financial_year)
    except SQLAlchemyError as e:
        logger.error(f"Chart 6 error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Chart6: {len(rows)} months for division '{division}', year '{financial_year}'")
    return rows
