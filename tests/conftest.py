"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from boutique_ledger.api.main import create_app
from boutique_ledger.infrastructure.database.models import Base
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.domain.models import Client, Product, Rental, Sale


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def shop_clients() -> list[Client]:
    """Two known clients"""
    return [
        Client(
            id="client_a",
            first_name="Amina",
            last_name="Benali",
            phone="0550123456",
            email="amina@example.com",
            created_at=datetime(2024, 1, 10, 9, 0),
        ),
        Client(
            id="client_b",
            first_name="Karim",
            last_name="Haddad",
            phone="0661987654",
            created_at=datetime(2024, 3, 2, 14, 30),
        ),
    ]


@pytest.fixture
def shop_products() -> list[Product]:
    """A dress for sale and a caftan for rent"""
    return [
        Product(
            id="prod_dress",
            name="Evening Dress",
            price_cents=50000,
            rental_price_cents=5000,
            purchase_price_cents=30000,
            stock=10,
            created_at=datetime(2024, 1, 1),
            barcode="1111",
        ),
        Product(
            id="prod_caftan",
            name="Caftan",
            price_cents=120000,
            rental_price_cents=8000,
            purchase_price_cents=70000,
            stock=3,
            created_at=datetime(2024, 1, 1),
            barcode="2222",
        ),
    ]


def make_sale(
    sale_id: str,
    client_id: str,
    total_cents: int,
    paid_cents: int = 0,
    created_at: datetime = datetime(2024, 2, 15, 10, 0),
    product_id: str = "prod_dress",
    quantity: int = 1,
) -> Sale:
    """Sale with a consistent balance; status follows the derivation rules"""
    remaining = total_cents - paid_cents
    status = "paid" if remaining <= 0 else ("partial" if paid_cents > 0 else "pending")
    return Sale(
        id=sale_id,
        client_id=client_id,
        product_id=product_id,
        quantity=quantity,
        unit_price_cents=total_cents // quantity,
        discount_cents=0,
        total_cents=total_cents,
        paid_cents=paid_cents,
        remaining_cents=remaining,
        status=status,
        created_by="Test Seller",
        created_at=created_at,
    )


def make_rental(
    rental_id: str,
    client_id: str,
    total_cents: int,
    paid_cents: int = 0,
    created_at: datetime = datetime(2024, 2, 20, 10, 0),
    product_id: str = "prod_caftan",
    start_date: date = date(2024, 2, 20),
    end_date: date = date(2024, 2, 22),
    rental_status: str = "active",
) -> Rental:
    remaining = total_cents - paid_cents
    status = "paid" if remaining <= 0 else ("partial" if paid_cents > 0 else "pending")
    return Rental(
        id=rental_id,
        client_id=client_id,
        product_id=product_id,
        quantity=1,
        daily_rate_cents=total_cents // 3,
        start_date=start_date,
        end_date=end_date,
        deposit_cents=0,
        total_cents=total_cents,
        paid_cents=paid_cents,
        remaining_cents=remaining,
        status=status,
        created_by="Test Seller",
        created_at=created_at,
        rental_status=rental_status,
    )


@pytest.fixture
def sale_factory():
    return make_sale


@pytest.fixture
def rental_factory():
    return make_rental
