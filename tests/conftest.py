"""Shared test fixtures and configuration."""

import os
from datetime import date
from decimal import Decimal

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret-key-do-not-use")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from expense_api.core.enums import ExpenseCategory, UserRole
from expense_api.db.base import Base
from expense_api.db.session import SessionLocal, engine
from expense_api.main import app
from expense_api.services import expense_report_service, expense_service, user_service


@pytest.fixture(autouse=True)
def _schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def employee(db):
    return user_service.create_user(
        db,
        name="Jean Dupont",
        email="jean.dupont@example.com",
        password="password123",
        role=UserRole.EMPLOYEE,
    )


@pytest.fixture
def admin_headers(db, client):
    user_service.create_user(
        db,
        name="Alice Admin",
        email="admin@example.com",
        password="admin-password",
        role=UserRole.ADMIN,
    )
    resp = client.post(
        "/auth/login",
        json={"email": "admin@example.com", "password": "admin-password"},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@pytest.fixture
def make_report(db, employee):
    """Create a DRAFT report owned by the employee."""

    def _make(title="Business trip", report_date=date(2024, 1, 15)):
        return expense_report_service.create_report(
            db, title=title, report_date=report_date, user_id=employee.id
        )

    return _make


@pytest.fixture
def add_expense(db):
    """Create an expense under a report and return it."""

    def _add(report_id, amount, category=ExpenseCategory.TRAVEL, receipt=None, **extra):
        data = {
            "report_id": report_id,
            "name": extra.pop("name", f"{category.value.title()} expense"),
            "amount": Decimal(amount),
            "expense_date": extra.pop("expense_date", date(2024, 1, 15)),
            "category": category,
        }
        data.update(extra)
        return expense_service.create_expense(db, data, receipt)

    return _add
