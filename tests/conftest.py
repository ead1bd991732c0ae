"""
Shared fixtures: an in-memory SQLite database, seed helpers and an API client.

Run with:
    pytest -v
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from dependencies import create_access_token
from models import Base, Payment, PaymentCategory, PaymentStatus, Property, Tenant, User, UserRole
from services.ledger_store import LedgerStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return LedgerStore(db)


class Seed:
    """Small factory for users, properties, tenants and payments."""

    def __init__(self, db):
        self.db = db
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def user(self, role: str, name: str = "User") -> User:
        n = self._next()
        user = User(email=f"user{n}@example.com", name=f"{name} {n}", role=role)
        self.db.add(user)
        self.db.commit()
        return user

    def property(self, owner: User, name: str = "Sunrise Apartments") -> Property:
        prop = Property(name=name, address="Moi Avenue, Nairobi", owner_id=owner.id)
        self.db.add(prop)
        self.db.commit()
        return prop

    def tenant(
        self,
        prop: Property,
        monthly_rent="10000",
        deposit_amount="0",
        lease_start_date=None,
        lease_end_date=None,
        user: User = None,
    ) -> Tenant:
        tenant = Tenant(
            name=f"Tenant {self._next()}",
            property_id=prop.id,
            user_id=user.id if user else None,
            monthly_rent=Decimal(monthly_rent) if monthly_rent is not None else None,
            deposit_amount=Decimal(deposit_amount) if deposit_amount is not None else None,
            lease_start_date=lease_start_date,
            lease_end_date=lease_end_date,
        )
        self.db.add(tenant)
        self.db.commit()
        return tenant

    def payment(
        self,
        tenant: Tenant,
        amount,
        category=PaymentCategory.RENT,
        status=PaymentStatus.COMPLETED,
        payment_date: datetime = None,
        transaction_id: str = None,
    ) -> Payment:
        payment = Payment(
            tenant_id=tenant.id,
            property_id=tenant.property_id,
            category=category,
            amount=Decimal(str(amount)),
            status=status,
            payment_date=payment_date or datetime(2024, 2, 1, 9, 30),
            transaction_id=transaction_id,
        )
        self.db.add(payment)
        self.db.commit()
        return payment


@pytest.fixture
def seed(db):
    return Seed(db)


@pytest.fixture
def owner(seed):
    return seed.user(UserRole.PROPERTY_OWNER.value, "Owner")


@pytest.fixture
def prop(seed, owner):
    return seed.property(owner)


@pytest.fixture
def client(session_factory):
    from main import app

    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def first_of_previous_month(today: date) -> date:
    if today.month == 1:
        return date(today.year - 1, 12, 1)
    return date(today.year, today.month - 1, 1)
