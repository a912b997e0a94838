"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from casino_ledger.api.main import create_app
from casino_ledger.api.dependencies import get_price_oracle
from casino_ledger.domain.models import Quote
from casino_ledger.infrastructure.database.models import Base
from casino_ledger.infrastructure.database.session import get_db
from casino_ledger.services.accounts import open_account


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "alice"


class FixedPriceOracle:
    """Deterministic oracle double; prices only change when a test says so"""

    def __init__(self, prices: Dict[str, str]):
        self.prices = {symbol: Decimal(price) for symbol, price in prices.items()}
        self.calls = 0

    def set_price(self, symbol: str, price: str) -> None:
        self.prices[symbol] = Decimal(price)

    def get_prices(self) -> Dict[str, Quote]:
        self.calls += 1
        return {
            symbol: Quote(symbol=symbol, name=symbol.title(), price=price, change_percent=Decimal("0.00"))
            for symbol, price in self.prices.items()
        }


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
def oracle() -> FixedPriceOracle:
    return FixedPriceOracle({"TECH": "100.00", "BANK": "85.00", "FOOD": "45.50"})


@pytest.fixture
def account(db: Session):
    """Account with 1000.00 balance and a 750 credit score"""
    return open_account(db, USER_ID, balance=Decimal("1000.00"), credit_score=750)


@pytest.fixture
def client(db: Session, oracle: FixedPriceOracle) -> TestClient:
    """Create FastAPI test client with test database and fixed prices"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_oracle] = lambda: oracle
    return TestClient(app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    """Identity header the auth gateway would attach"""
    return {"X-User-Id": USER_ID}
