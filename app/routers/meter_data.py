"""
Raw meter data, statistics and database diagnostic endpoints.
"""
import logging
import time
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.database import get_db
from app.exceptions import QueryFailure
from app.schemas.common import StatsResponse, DbTestResponse
from app.schemas.meter_reading import MeterReadingRecord, PaginatedMeterData
from app.services.meter_data_service import MeterDataService
from app.utils.pagination import parse_page_params, page_offset, build_page
from typing import Optional, List

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/alldata", response_model=PaginatedMeterData)
def get_all_data(
    page: Optional[str] = Query(None, description="Zero-based page number"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Rows per page"),
    db: Session = Depends(get_db)
):
    """
    Paginated listing of every reading.

    Rows are ordered by division, month and industry, with year and id as
    tie-breakers so the order is total. ``page`` and ``pageSize`` fall
    back to 0 and 20 when missing or not numeric. The total
    row count is a separate query run on every request.
    """
    start_time = time.perf_counter()
    page_number, size = parse_page_params(page, page_size)
    logger.info(
        f"Fetching page {page_number + 1}: offset={page_offset(page_number, size)}, limit={size}"
    )

    service = MeterDataService(db)
    try:
        total = service.count_readings()
        # Past the last row: no query, the offset may not fit a driver integer
        if page_offset(page_number, size) < total:
            rows = service.get_page(page_number, size)
        else:
            rows = []
    except SQLAlchemyError as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Paginated data query failed after {duration_ms:.0f}ms: {e}")
        raise QueryFailure.wrap(e, message="Database query failed")

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"Page {page_number + 1} fetched in {duration_ms:.0f}ms. Records: {len(rows)}/{total}"
    )
    return build_page(rows, total, page_number, size)


@router.get("/all-meter-data", response_model=List[MeterReadingRecord])
def get_all_meter_data(db: Session = Depends(get_db)):
    """Legacy unpaginated listing, limited to 100 rows."""
    try:
        rows = MeterDataService(db).get_recent_sample()
    except SQLAlchemyError as e:
        logger.error(f"Legacy endpoint error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Legacy endpoint: {len(rows)} records")
    return rows


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    """Record count, distinct industries/divisions/months and summed difference."""
    try:
        stats = MeterDataService(db).get_stats()
    except SQLAlchemyError as e:
        logger.error(f"Stats error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Database stats: {stats}")
    return stats


@router.get("/test-db", response_model=DbTestResponse)
def test_database(db: Session = Depends(get_db)):
    """Check database connectivity; returns server time and version."""
    try:
        return MeterDataService(db).check_connection()
    except SQLAlchemyError as e:
        logger.error(f"Database test error: {e}")
        raise QueryFailure.wrap(e, message="Database connection failed")
