"""Tests for the sample-data seed."""

from decimal import Decimal

from expense_api.core.enums import ExpenseReportStatus
from expense_api.models.expense_report import ExpenseReport
from expense_api.models.user import User
from expense_api.seed import SEED_EMAIL, seed


def test_seed_creates_sample_reports(db) -> None:
    user = seed(db)

    reports = {
        r.title: r
        for r in db.query(ExpenseReport).filter(ExpenseReport.user_id == user.id)
    }
    assert reports["Déplacement professionnel à Paris"].status == ExpenseReportStatus.SUBMITTED
    assert reports["Déplacement professionnel à Paris"].total_amount == Decimal("210.50")
    assert reports["Formation à Lyon"].status == ExpenseReportStatus.DRAFT
    assert reports["Formation à Lyon"].total_amount == Decimal("285.00")


def test_seed_is_idempotent(db) -> None:
    first = seed(db)
    second = seed(db)

    assert first.id == second.id
    assert db.query(User).filter(User.email == SEED_EMAIL).count() == 1
    assert db.query(ExpenseReport).count() == 2
