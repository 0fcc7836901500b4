"""
Meter reading SQLAlchemy model.
Stores monthly water meter readings per industry, division and financial year.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Index
from app.database import Base


class MeterReading(Base):
    """
    Industry meter readings table model.

    One row per (industry, division, month, financial year) observation.
    Rows are loaded externally; this service only reads them.
    """
    __tablename__ = "industry_meter_readings"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Industry / organisation
    industryname = Column(String(255), nullable=False, index=True)
    division_id = Column(String(100), nullable=False, index=True)
    industry_id = Column(String(100))

    # Period
    month_id = Column(Integer, nullable=False)
    monthname = Column(String(20), nullable=True)
    financial_year = Column(String(20), index=True)
    currentfinancialyear = Column(String(20), nullable=True)

    # Readings
    initialmeter_reading = Column(Numeric)
    finalmeter_reading = Column(Numeric)
    # Stored as text upstream; cast to numeric when aggregated
    meterreadingdifference = Column(String(50))

    insert_date = Column(DateTime)

    __table_args__ = (
        Index('idx_meter_division_year', 'division_id', 'financial_year'),
        Index('idx_meter_industry_year', 'industryname', 'financial_year'),
        Index('idx_meter_listing_order', 'division_id', 'month_id', 'industryname'),
    )

    def __repr__(self):
        return (
            f"<MeterReading(id={self.id}, industry={self.industryname}, "
            f"division={self.division_id}, month={self.month_id}, year={self.financial_year})>"
        )
