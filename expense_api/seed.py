"""Populate the database with a sample employee, reports and expenses.

    python -m expense_api.seed
"""

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from expense_api.core.enums import ExpenseCategory, ExpenseReportStatus, UserRole
from expense_api.core.logging_config import get_logger, setup_logging
from expense_api.db.base import Base
from expense_api.db.session import SessionLocal, engine
from expense_api.services import expense_report_service, expense_service, user_service

logger = get_logger(__name__)

SEED_EMAIL = "jean.dupont@example.com"
SEED_PASSWORD = "password123"

SAMPLE_REPORTS = [
    {
        "title": "Déplacement professionnel à Paris",
        "report_date": date(2024, 1, 15),
        "status": ExpenseReportStatus.SUBMITTED,
        "expenses": [
            ("Billet de train Paris", "Aller-retour Paris Gare de Lyon", "125.50", ExpenseCategory.TRAVEL),
            ("Déjeuner client", "Restaurant Le Bistrot", "85.00", ExpenseCategory.MEAL),
        ],
    },
    {
        "title": "Formation à Lyon",
        "report_date": date(2024, 1, 22),
        "status": ExpenseReportStatus.DRAFT,
        "expenses": [
            ("Hôtel Lyon Centre", "2 nuits - Hôtel Mercure", "240.00", ExpenseCategory.HOTEL),
            ("Taxi aéroport", "Trajet aéroport - hôtel", "45.00", ExpenseCategory.TRANSPORT),
        ],
    },
]


def seed(db: Session):
    user = user_service.get_user_by_email(db, SEED_EMAIL)
    if user:
        logger.info("seed_skipped", reason="user exists", email=SEED_EMAIL)
        return user

    user = user_service.create_user(
        db,
        name="Jean Dupont",
        email=SEED_EMAIL,
        password=SEED_PASSWORD,
        role=UserRole.EMPLOYEE,
    )

    for sample in SAMPLE_REPORTS:
        report = expense_report_service.create_report(
            db,
            title=sample["title"],
            report_date=sample["report_date"],
            user_id=user.id,
        )
        for name, description, amount, category in sample["expenses"]:
            expense_service.create_expense(
                db,
                {
                    "report_id": report.id,
                    "name": name,
                    "description": description,
                    "amount": Decimal(amount),
                    "expense_date": sample["report_date"],
                    "category": category,
                    "receipt_required": True,
                },
            )
        if sample["status"] == ExpenseReportStatus.SUBMITTED:
            expense_report_service.submit_report(db, report.id)

        report = expense_report_service.get_report(db, report.id)
        logger.info(
            "seed_report_created",
            title=report.title,
            status=report.status.value,
            total=str(report.total_amount),
        )

    return user


def main():
    setup_logging()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        user = seed(db)
        logger.info("seed_completed", email=user.email, user_id=str(user.id))
    finally:
        db.close()


if __name__ == "__main__":
    main()
