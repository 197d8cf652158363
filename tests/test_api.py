"""Tests for the expense report and expense HTTP routes."""

import io
import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi import UploadFile

from expense_api.api.expenses import _read_receipt
from expense_api.core.constants import MAX_FILE_SIZE
from expense_api.core.enums import ExpenseCategory
from expense_api.services import expense_service
from expense_api.services.expense_service import UploadedReceipt


@pytest.fixture
def report_id(client, employee):
    resp = client.post(
        "/expense-reports",
        json={"userId": str(employee.id), "title": "Business trip Paris", "reportDate": "2024-01-15"},
    )
    assert resp.status_code == 201
    return resp.json()["id"]


def _create_expense(client, report_id, amount="125.50", category="TRAVEL", files=None, **fields):
    data = {
        "reportId": report_id,
        "name": fields.pop("name", "Train ticket"),
        "amount": amount,
        "expenseDate": "2024-01-15",
        "category": category,
    }
    data.update(fields)
    return client.post("/expenses", data=data, files=files)


class TestExpenseReportRoutes:
    def test_create(self, client, employee) -> None:
        resp = client.post(
            "/expense-reports",
            json={"userId": str(employee.id), "title": "Trip", "reportDate": "2024-02-01"},
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "DRAFT"
        assert body["totalAmount"] == 0
        assert body["currency"] == "EUR"
        assert body["reportDate"] == "2024-02-01"
        assert body["expenses"] == []

    def test_create_validation_is_400(self, client, employee) -> None:
        resp = client.post(
            "/expense-reports",
            json={"userId": str(employee.id), "title": "x" * 201, "reportDate": "2024-02-01"},
        )

        assert resp.status_code == 400

    def test_create_for_unknown_user_is_404(self, client) -> None:
        resp = client.post(
            "/expense-reports",
            json={"userId": str(uuid.uuid4()), "title": "Trip", "reportDate": "2024-02-01"},
        )

        assert resp.status_code == 404

    def test_get_and_list_by_user(self, client, employee, report_id) -> None:
        assert client.get(f"/expense-reports/{report_id}").json()["title"] == "Business trip Paris"

        resp = client.get(f"/expense-reports/user/{employee.id}")
        assert [r["id"] for r in resp.json()] == [report_id]

    def test_get_missing_is_404(self, client) -> None:
        resp = client.get(f"/expense-reports/{uuid.uuid4()}")

        assert resp.status_code == 404
        assert "not found" in resp.json()["detail"]

    def test_submit_once(self, client, report_id) -> None:
        resp = client.post(f"/expense-reports/{report_id}/submit")
        assert resp.status_code == 200
        assert resp.json()["status"] == "SUBMITTED"

        resp = client.post(f"/expense-reports/{report_id}/submit")
        assert resp.status_code == 400
        assert "draft" in resp.json()["detail"].lower()

    def test_patch_status_freely(self, client, report_id) -> None:
        resp = client.patch(
            f"/expense-reports/{report_id}",
            json={"status": "REJECTED", "rejectionReason": "No receipts"},
        )

        assert resp.status_code == 200
        assert resp.json()["status"] == "REJECTED"
        assert resp.json()["rejectionReason"] == "No receipts"
        assert client.post(f"/expense-reports/{report_id}/submit").status_code == 400

    def test_patch_rejects_null_title(self, client, report_id) -> None:
        resp = client.patch(f"/expense-reports/{report_id}", json={"title": None})

        assert resp.status_code == 400

    def test_delete_is_soft(self, client, report_id) -> None:
        assert client.delete(f"/expense-reports/{report_id}").status_code == 204
        assert client.get(f"/expense-reports/{report_id}").status_code == 404
        assert client.delete(f"/expense-reports/{report_id}").status_code == 404

    def test_calculate_total(self, client, report_id) -> None:
        _create_expense(client, report_id, "125.50", "TRAVEL")
        _create_expense(client, report_id, "85.00", "MEAL", status="REJECTED")

        resp = client.post(f"/expense-reports/{report_id}/calculate-total")

        assert resp.status_code == 200
        assert resp.json() == {"total": 125.5}


class TestListRoute:
    @pytest.fixture
    def seeded(self, client, employee):
        rows = [
            ("Client visit", "2024-01-10", "40.00", "SUBMITTED"),
            ("Training", "2024-02-05", "120.00", "SUBMITTED"),
            ("Client dinner", "2024-03-01", "650.00", "SUBMITTED"),
            ("Supplies", "2024-01-20", "300.00", "DRAFT"),
        ]
        for title, report_date, amount, status in rows:
            rid = client.post(
                "/expense-reports",
                json={"userId": str(employee.id), "title": title, "reportDate": report_date},
            ).json()["id"]
            _create_expense(client, rid, amount)
            if status == "SUBMITTED":
                client.post(f"/expense-reports/{rid}/submit")

    def test_combined_filters(self, client, seeded) -> None:
        resp = client.get(
            "/expense-reports",
            params={"status": "SUBMITTED", "minAmount": 50, "maxAmount": 500},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert [r["title"] for r in body["data"]] == ["Training"]
        assert body["meta"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}

    def test_search_sort_and_paginate(self, client, seeded) -> None:
        resp = client.get(
            "/expense-reports",
            params={"search": "CLIENT", "sortBy": "totalAmount", "order": "asc", "limit": 1, "page": 2},
        )

        body = resp.json()
        assert [r["title"] for r in body["data"]] == ["Client dinner"]
        assert body["meta"] == {"page": 2, "limit": 1, "total": 2, "totalPages": 2}

    def test_expenses_are_embedded(self, client, seeded) -> None:
        body = client.get("/expense-reports", params={"search": "Supplies"}).json()

        assert body["data"][0]["totalAmount"] == 300.0
        assert len(body["data"][0]["expenses"]) == 1

    def test_empty(self, client) -> None:
        body = client.get("/expense-reports").json()

        assert body == {"data": [], "meta": {"page": 1, "limit": 10, "total": 0, "totalPages": 0}}

    @pytest.mark.parametrize(
        "params",
        [
            {"limit": 101},
            {"limit": 0},
            {"page": 0},
            {"status": "UNKNOWN"},
            {"sortBy": "title"},
            {"order": "sideways"},
            {"minAmount": -5},
        ],
    )
    def test_bad_query_is_400(self, client, params) -> None:
        assert client.get("/expense-reports", params=params).status_code == 400


class TestExpenseRoutes:
    def test_create_with_pdf(self, client, report_id) -> None:
        pdf = b"%PDF" + b"x" * (512 * 1024 - 4)

        resp = _create_expense(
            client, report_id, files={"file": ("receipt.pdf", pdf, "application/pdf")}
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["amount"] == 125.5
        assert body["status"] == "SUBMITTED"
        assert len(body["attachments"]) == 1
        attachment = body["attachments"][0]
        assert attachment["fileName"] == "receipt.pdf"
        assert attachment["fileSize"] == 512 * 1024
        assert "fileData" not in attachment
        assert client.get(f"/expense-reports/{report_id}").json()["totalAmount"] == 125.5

    def test_oversized_file_is_400(self, client, report_id) -> None:
        big = b"\0" * (6 * 1024 * 1024)

        resp = _create_expense(
            client, report_id, files={"file": ("scan.pdf", big, "application/pdf")}
        )

        assert resp.status_code == 400
        assert "5MB" in resp.json()["detail"]
        assert client.get("/expenses", params={"reportId": report_id}).json() == []

    def test_executable_is_400(self, client, report_id) -> None:
        resp = _create_expense(
            client,
            report_id,
            files={"file": ("setup.exe", b"MZ", "application/x-msdownload")},
        )

        assert resp.status_code == 400
        assert "not allowed" in resp.json()["detail"]

    def test_missing_fields_is_400(self, client, report_id) -> None:
        resp = client.post("/expenses", data={"reportId": report_id, "name": "No amount"})

        assert resp.status_code == 400

    def test_unknown_category_is_400(self, client, report_id) -> None:
        assert _create_expense(client, report_id, category="GIFTS").status_code == 400

    def test_update_reject_and_total(self, client, report_id) -> None:
        expense_id = _create_expense(client, report_id, "125.50").json()["id"]
        _create_expense(client, report_id, "85.00", "MEAL")
        assert client.get(f"/expense-reports/{report_id}").json()["totalAmount"] == 210.5

        resp = client.patch(f"/expenses/{expense_id}", data={"status": "REJECTED"})

        assert resp.status_code == 200
        assert resp.json()["status"] == "REJECTED"
        assert resp.json()["name"] == "Train ticket"
        assert client.get(f"/expense-reports/{report_id}").json()["totalAmount"] == 85.0

    def test_update_with_new_file(self, client, report_id) -> None:
        expense_id = _create_expense(client, report_id).json()["id"]

        resp = client.patch(
            f"/expenses/{expense_id}",
            data={"amount": "99.90"},
            files={"file": ("photo.png", b"\x89PNG", "image/png")},
        )

        assert resp.status_code == 200
        assert resp.json()["amount"] == 99.9
        assert [a["mimeType"] for a in resp.json()["attachments"]] == ["image/png"]

    def test_delete(self, client, report_id) -> None:
        expense_id = _create_expense(client, report_id).json()["id"]

        assert client.delete(f"/expenses/{expense_id}").status_code == 204
        assert client.get(f"/expenses/{expense_id}").status_code == 404
        assert client.get(f"/expense-reports/{report_id}").json()["totalAmount"] == 0

    def test_download_and_delete_attachment(self, client, report_id) -> None:
        created = _create_expense(
            client, report_id, files={"file": ("receipt.pdf", b"%PDF-1.4 data", "application/pdf")}
        ).json()
        attachment_id = created["attachments"][0]["id"]

        resp = client.get(f"/expenses/attachments/{attachment_id}/download")

        assert resp.status_code == 200
        assert resp.content == b"%PDF-1.4 data"
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.headers["content-disposition"] == (
            "attachment; filename=\"receipt.pdf\"; filename*=UTF-8''receipt.pdf"
        )

        assert client.delete(f"/expenses/attachments/{attachment_id}").status_code == 204
        assert client.get(f"/expenses/attachments/{attachment_id}/download").status_code == 404
        assert client.get(f"/expenses/{created['id']}").json()["attachments"] == []

    @pytest.mark.parametrize(
        "file_name, disposition",
        [
            (
                "收据.pdf",
                "attachment; filename=\"__.pdf\"; filename*=UTF-8''%E6%94%B6%E6%8D%AE.pdf",
            ),
            (
                'taxi "night".pdf',
                "attachment; filename=\"taxi _night_.pdf\"; filename*=UTF-8''taxi%20%22night%22.pdf",
            ),
        ],
    )
    def test_download_with_awkward_file_name(self, client, db, report_id, file_name, disposition) -> None:
        expense = expense_service.create_expense(
            db,
            {
                "report_id": uuid.UUID(report_id),
                "name": "Receipt",
                "amount": Decimal("10.00"),
                "expense_date": date(2024, 1, 15),
                "category": ExpenseCategory.MEAL,
            },
            UploadedReceipt(file_name, "application/pdf", b"%PDF-1.4"),
        )
        attachment_id = expense.attachments[0].id

        resp = client.get(f"/expenses/attachments/{attachment_id}/download")

        assert resp.status_code == 200
        assert resp.content == b"%PDF-1.4"
        assert resp.headers["content-disposition"] == disposition

    def test_upload_read_stops_past_the_limit(self) -> None:
        upload = UploadFile(file=io.BytesIO(b"\0" * (MAX_FILE_SIZE + 4096)), filename="scan.pdf")

        receipt = _read_receipt(upload)

        assert len(receipt.data) == MAX_FILE_SIZE + 1


class TestMisc:
    def test_health(self, client) -> None:
        assert client.get("/health").json() == {"status": "ok"}

    def test_reference_data(self, client) -> None:
        body = client.get("/reference-data").json()

        assert body["reportStatuses"] == [
            "DRAFT", "SUBMITTED", "UNDER_REVIEW", "APPROVED", "REJECTED", "PAID",
        ]
        assert "OFFICE_SUPPLIES" in body["expenseCategories"]
        assert body["maxFileSize"] == 5 * 1024 * 1024
        assert "application/pdf" in body["allowedMimeTypes"]
