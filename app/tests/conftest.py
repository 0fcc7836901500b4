import sys
import pathlib
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the project root is importable so `import app` works
ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.meter_reading import MeterReading  # noqa: E402


# (industry, division, industry_id, month_id, monthname, year, initial, final, difference, inserted)
SEED_ROWS = [
    ("Alpha Steel", "EE_Adava", "IND001", 4, "April", "2023-24", 1000, 1100.5, "100.5", datetime(2023, 4, 10)),
    ("Alpha Steel", "EE_Adava", "IND001", 5, "May", "2023-24", 1100.5, 1150.5, "50", datetime(2023, 5, 10)),
    ("Beta Paper", "EE_Adava", "IND002", 4, "April", "2023-24", 500, 800, "300", datetime(2023, 4, 12)),
    ("Gamma Foods", "EE_Adava", "IND003", 4, "April", "2023-24", 90, 110, "20", datetime(2023, 4, 15)),
    ("Alpha Steel", "EE_Angul", "IND001", 4, "April", "2023-24", 10, 20, "10", datetime(2023, 4, 20)),
    ("Delta Mills", "EE_Angul", "IND004", 6, "June", "2023-24", 200, 275, "75", datetime(2023, 6, 5)),
    ("Alpha Steel", "EE_Adava", "IND001", 3, "March", "2022-23", 960, 1000, "40", datetime(2023, 3, 8)),
    ("Beta Paper", "Adava", "IND002", 7, None, "2022-23", 495, 500, "5", datetime(2022, 7, 1)),
]


def seed_readings(session):
    for (industry, division, industry_id, month_id, monthname, year,
         initial, final, difference, inserted) in SEED_ROWS:
        session.add(MeterReading(
            industryname=industry,
            division_id=division,
            industry_id=industry_id,
            month_id=month_id,
            monthname=monthname,
            financial_year=year,
            currentfinancialyear="2023-24",
            initialmeter_reading=initial,
            finalmeter_reading=final,
            meterreadingdifference=difference,
            insert_date=inserted,
        ))
    session.commit()


class BrokenSession:
    """Session stand-in for a data store that rejects every query."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    query = _fail
    execute = _fail
    get_bind = _fail

    def close(self):
        pass


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    seed_readings(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def broken_client():
    def override_get_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
