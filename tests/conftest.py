"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from receivables_gateway.api.main import create_app
from receivables_gateway.api.dependencies import get_today
from receivables_gateway.infrastructure.database.models import Base
from receivables_gateway.infrastructure.database.session import get_db
from receivables_gateway.domain.models import Debt, Scheme


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2024, 3, 10)
OWNER_ID = "owner_1"


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed calendar day"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app, headers={"X-Owner-ID": OWNER_ID})


@pytest.fixture
def single_debt() -> Debt:
    """$500.00 owed in one payment, nothing paid yet"""
    return Debt(
        id="debt-single",
        owner_id=OWNER_ID,
        name="Ana Souza",
        scheme=Scheme.SINGLE,
        principal_cents=50000,
        created_at=datetime(2024, 1, 5, 9, 0),
    )


@pytest.fixture
def recurring_debt() -> Debt:
    """Open-ended $300.00 monthly payments with no upfront amount"""
    return Debt(
        id="debt-recurring",
        owner_id=OWNER_ID,
        name="Carlos Lima",
        scheme=Scheme.RECURRING_UNTIL_PROCESS_END,
        principal_cents=0,
        created_at=datetime(2024, 1, 5, 9, 0),
        recurring_amount_cents=30000,
        recurring_day_of_month=10,
    )
