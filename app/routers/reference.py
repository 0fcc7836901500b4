"""
Reference list API endpoints (selector options).
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.database import get_db
from app.exceptions import QueryFailure
from app.schemas.common import DropdownOption
from app.services.reference_service import ReferenceService
from typing import List

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/years", response_model=List[DropdownOption])
def get_years(db: Session = Depends(get_db)):
    """Distinct financial years, most recent first."""
    try:
        years = ReferenceService(db).get_years()
    except SQLAlchemyError as e:
        logger.error(f"Years error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Years: {len(years)} unique years found")
    return years


@router.get("/divisions", response_model=List[DropdownOption])
def get_divisions(db: Session = Depends(get_db)):
    """
    Distinct divisions.

    ``id`` keeps the raw code used by the chart filters; ``name`` drops the
    two-letter scheme prefix (``EE_Adava`` -> ``Adava``).
    """
    try:
        divisions = ReferenceService(db).get_divisions()
    except SQLAlchemyError as e:
        logger.error(f"Divisions error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Divisions: {len(divisions)} unique divisions found")
    logger.debug(f"Division sample data: {divisions[:3]}")
    return divisions


@router.get("/industries", response_model=List[DropdownOption])
def get_industries(db: Session = Depends(get_db)):
    """First 100 industry names in alphabetical order."""
    try:
        industries = ReferenceService(db).get_industries()
    except SQLAlchemyError as e:
        logger.error(f"Industries error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Industries: {len(industries)} unique industries found")
    return industries


@router.get("/months", response_model=List[DropdownOption])
def get_months(db: Session = Depends(get_db)):
    """Distinct month ids."""
    try:
        months = ReferenceService(db).get_months()
    except SQLAlchemyError as e:
        logger.error(f"Months error: {e}")
        raise QueryFailure.wrap(e)

    logger.info(f"Months: {len(months)} unique months found")
    return months
