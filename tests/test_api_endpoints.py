"""API endpoint tests.

Runs the FastAPI app against an in-memory database.
"""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from paytrack.api.dependencies import get_db_session
from paytrack.models import Employee

from tests.conftest import ADMIN_PASSWORD

pytestmark = pytest.mark.asyncio


def day_payload(work_date: str = "2026-02-03", **overrides) -> dict:
    payload = {
        "work_date": work_date,
        "hours": "8",
        "start_time": "09:00",
        "end_time": "17:00",
        "break_minutes": 0,
        "clients": [
            {
                "client_name": "Dana",
                "procedure_name": "Color",
                "amount_earned": "50",
                "tip_amount": "20",
                "tip_received_cash": True,
            }
        ],
        "product_sales": [
            {"product_name": "Serum", "sale_amount": "60", "commission_amount": "15"}
        ],
    }
    payload.update(overrides)
    return payload


class TestStatusEndpoint:
    """Test the service status endpoint."""

    async def test_status_ok(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "ok"
        assert data["version"] == "test"
        assert "timestamp" in data

    async def test_status_degraded_when_store_unreachable(
        self, app: FastAPI, client: AsyncClient
    ):
        class UnreachableSession:
            async def execute(self, statement):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        async def unreachable() -> AsyncGenerator[UnreachableSession, None]:
            yield UnreachableSession()

        app.dependency_overrides[get_db_session] = unreachable

        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"

    async def test_status_lives_under_api_prefix(self, client: AsyncClient):
        assert (await client.get("/api/ready")).status_code == 404
        assert (await client.get("/health")).status_code == 404


class TestEmployeeLogin:
    """Test PIN login and PIN change."""

    async def test_verify_pin(self, client: AsyncClient, employee: Employee):
        response = await client.post("/api/verify-pin", json={"pin": "1234"})
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == employee.id
        assert data["name"] == "Alice Reyes"
        assert "pin" not in data

    async def test_verify_wrong_pin(self, client: AsyncClient, employee: Employee):
        response = await client.post("/api/verify-pin", json={"pin": "0000"})
        assert response.status_code == 401

    async def test_change_pin(self, client: AsyncClient, employee: Employee):
        response = await client.post(
            f"/api/employees/{employee.id}/change-pin",
            json={"current_pin": "1234", "new_pin": "2222"},
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        response = await client.post("/api/verify-pin", json={"pin": "2222"})
        assert response.status_code == 200

    async def test_change_pin_wrong_current(self, client: AsyncClient, employee: Employee):
        response = await client.post(
            f"/api/employees/{employee.id}/change-pin",
            json={"current_pin": "9999", "new_pin": "2222"},
        )
        assert response.status_code == 400

    async def test_change_pin_taken(
        self, client: AsyncClient, employee: Employee, other_employee: Employee
    ):
        response = await client.post(
            f"/api/employees/{employee.id}/change-pin",
            json={"current_pin": "1234", "new_pin": "5678"},
        )
        assert response.status_code == 409


class TestTimeEntries:
    """Test the employee's time entry endpoints."""

    async def test_create_and_list(self, client: AsyncClient, employee: Employee):
        base = f"/api/employees/{employee.id}/time-entries"
        response = await client.post(base, json=day_payload())
        assert response.status_code == 201, response.text
        created = response.json()
        assert created["work_date"] == "2026-02-03"
        assert created["clients"][0]["client_name"] == "Dana"
        assert created["product_sales"][0]["product_name"] == "Serum"

        await client.post(base, json=day_payload("2026-02-05", clients=[], product_sales=[]))

        response = await client.get(base)
        assert [e["work_date"] for e in response.json()] == ["2026-02-05", "2026-02-03"]

    async def test_conflict_and_replace(self, client: AsyncClient, employee: Employee):
        base = f"/api/employees/{employee.id}/time-entries"
        await client.post(base, json=day_payload())

        response = await client.get(f"{base}/conflict", params={"date": "2026-02-03"})
        data = response.json()
        assert data["has_conflict"] is True
        assert Decimal(data["existing_entry"]["hours"]) == Decimal("8")

        response = await client.post(base, json=day_payload(hours="6"))
        assert response.status_code == 409

        response = await client.post(base, json=day_payload(hours="6", replace_existing=True))
        assert response.status_code == 201

        entries = (await client.get(base)).json()
        assert len(entries) == 1
        assert Decimal(entries[0]["hours"]) == Decimal("6")

    async def test_no_conflict(self, client: AsyncClient, employee: Employee):
        response = await client.get(
            f"/api/employees/{employee.id}/time-entries/conflict",
            params={"date": "2026-02-09"},
        )
        assert response.json() == {"has_conflict": False, "existing_entry": None}

    async def test_negative_hours_rejected(self, client: AsyncClient, employee: Employee):
        response = await client.post(
            f"/api/employees/{employee.id}/time-entries", json=day_payload(hours="-1")
        )
        assert response.status_code == 422

    async def test_delete_own_entry(self, client: AsyncClient, employee: Employee):
        base = f"/api/employees/{employee.id}/time-entries"
        entry_id = (await client.post(base, json=day_payload())).json()["id"]

        response = await client.delete(f"{base}/{entry_id}")
        assert response.status_code == 200
        assert (await client.get(base)).json() == []

        response = await client.delete(f"{base}/{entry_id}")
        assert response.status_code == 404

    async def test_cannot_delete_someone_elses_entry(
        self, client: AsyncClient, employee: Employee, other_employee: Employee
    ):
        entry_id = (
            await client.post(f"/api/employees/{employee.id}/time-entries", json=day_payload())
        ).json()["id"]

        response = await client.delete(
            f"/api/employees/{other_employee.id}/time-entries/{entry_id}"
        )
        assert response.status_code == 404

    async def test_unknown_employee(self, client: AsyncClient):
        response = await client.get("/api/employees/404/time-entries")
        assert response.status_code == 404
        assert response.json()["code"] == "EMPLOYEE_NOT_FOUND"


class TestPayPeriods:
    """Test pay period summaries and invoices."""

    async def test_pay_period_summary(self, client: AsyncClient, employee: Employee):
        await client.post(f"/api/employees/{employee.id}/time-entries", json=day_payload())

        response = await client.get(
            f"/api/employees/{employee.id}/pay-period",
            params={"offset": 0, "reference_date": "2026-02-02"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["period_start"] == "2026-02-01"
        assert data["period_end"] == "2026-02-15"
        assert data["period_label"] == "Feb 1–15, 2026"
        assert data["invoice_submitted"] is False
        assert data["invoice_date"] is None
        summary = data["summary"]
        assert Decimal(summary["total_wages"]) == Decimal("160")
        assert Decimal(summary["total_cash_tips_received"]) == Decimal("20")
        assert Decimal(summary["total_payable"]) == Decimal("225")
        assert len(data["entries"]) == 1
        assert data["entries"][0]["work_date"] == "2026-02-03"

    async def test_previous_period(self, client: AsyncClient, employee: Employee):
        response = await client.get(
            f"/api/employees/{employee.id}/pay-period",
            params={"offset": -1, "reference_date": "2026-03-05"},
        )
        data = response.json()
        assert data["period_start"] == "2026-02-16"
        assert data["period_end"] == "2026-02-28"
        assert data["period_offset"] == -1

    async def test_offset_out_of_range(self, client: AsyncClient, employee: Employee):
        response = await client.get(
            f"/api/employees/{employee.id}/pay-period", params={"offset": 10000}
        )
        assert response.status_code == 422

    async def test_offset_past_last_supported_period(
        self, client: AsyncClient, employee: Employee
    ):
        response = await client.get(
            f"/api/employees/{employee.id}/pay-period",
            params={"offset": 1, "reference_date": "9999-12-20"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INVALID_DATE"
        assert "9999-12-20" in data["detail"]

    async def test_invoice_preview(self, client: AsyncClient, employee: Employee):
        base = f"/api/employees/{employee.id}"
        await client.post(f"{base}/time-entries", json=day_payload("2026-02-03"))
        await client.post(f"{base}/time-entries", json=day_payload("2026-02-10"))

        response = await client.get(
            f"{base}/invoice-preview",
            params={"period_start": "2026-02-01", "period_end": "2026-02-15", "today": "2026-02-05"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["effective_end"] == "2026-02-05"
        assert data["employee"]["name"] == "Alice Reyes"
        assert [e["work_date"] for e in data["entries"]] == ["2026-02-03"]
        assert Decimal(data["summary"]["total_payable"]) == Decimal("225")

    async def test_invoice_preview_reversed(self, client: AsyncClient, employee: Employee):
        response = await client.get(
            f"/api/employees/{employee.id}/invoice-preview",
            params={
                "period_start": "2026-02-15",
                "period_end": "2026-02-01",
                "today": "2026-02-20",
            },
        )
        assert response.status_code == 400

    async def test_invoice_preview_unknown_employee(self, client: AsyncClient):
        response = await client.get(
            "/api/employees/999/invoice-preview",
            params={"period_start": "2026-02-01", "period_end": "2026-02-15"},
        )
        assert response.status_code == 404
        assert response.json()["code"] == "EMPLOYEE_NOT_FOUND"

    async def test_submit_invoice_once(self, client: AsyncClient, employee: Employee):
        base = f"/api/employees/{employee.id}"
        await client.post(f"{base}/time-entries", json=day_payload())
        body = {"period_start": "2026-02-01", "period_end": "2026-02-15"}

        response = await client.post(f"{base}/invoices", json=body)
        assert response.status_code == 201, response.text
        invoice = response.json()
        assert invoice["pay_period_start"] == "2026-02-01"
        assert Decimal(invoice["total_payable"]) == Decimal("225")
        assert invoice["email_sent"] is False

        response = await client.post(f"{base}/invoices", json=body)
        assert response.status_code == 409

        period = (
            await client.get(
                f"{base}/pay-period", params={"reference_date": "2026-02-07"}
            )
        ).json()
        assert period["invoice_submitted"] is True
        assert period["invoice_date"] is not None

    async def test_submit_invalid_period(self, client: AsyncClient, employee: Employee):
        response = await client.post(
            f"/api/employees/{employee.id}/invoices",
            json={"period_start": "2026-02-03", "period_end": "2026-02-15"},
        )
        assert response.status_code == 400


class TestAdmin:
    """Test admin panel endpoints."""

    async def test_verify_password(self, client: AsyncClient):
        response = await client.post("/api/admin/verify", json={"password": ADMIN_PASSWORD})
        assert response.json()["success"] is True

        response = await client.post("/api/admin/verify", json={"password": "nope"})
        assert response.json()["success"] is False

    async def test_employee_crud(self, client: AsyncClient):
        response = await client.post(
            "/api/admin/employees",
            json={"name": "Cam", "pin": "1111", "hourly_wage": "18.50", "pay_type": "hourly"},
        )
        assert response.status_code == 201, response.text
        employee_id = response.json()["id"]

        response = await client.post("/api/admin/employees", json={"name": "Dup", "pin": "1111"})
        assert response.status_code == 409

        response = await client.put(
            f"/api/admin/employees/{employee_id}",
            json={"name": "Cameron", "pin": "1112", "pay_type": "commission"},
        )
        assert response.status_code == 200, response.text
        assert response.json()["pay_type"] == "commission"

        employees = (await client.get("/api/admin/employees")).json()
        assert [(e["name"], e["pin"]) for e in employees] == [("Cameron", "1112")]

        response = await client.delete(f"/api/admin/employees/{employee_id}")
        assert response.status_code == 200
        assert (await client.get("/api/admin/employees")).json() == []

        response = await client.delete(f"/api/admin/employees/{employee_id}")
        assert response.status_code == 404

    async def test_invalid_pay_type(self, client: AsyncClient):
        response = await client.post(
            "/api/admin/employees", json={"name": "Eve", "pin": "3333", "pay_type": "salary"}
        )
        assert response.status_code == 422

    async def test_time_entries_and_invoices(
        self, client: AsyncClient, employee: Employee, other_employee: Employee
    ):
        await client.post(f"/api/employees/{employee.id}/time-entries", json=day_payload())
        entry_id = (
            await client.post(
                f"/api/employees/{other_employee.id}/time-entries",
                json=day_payload("2026-02-20"),
            )
        ).json()["id"]
        await client.post(
            f"/api/employees/{employee.id}/invoices",
            json={"period_start": "2026-02-01", "period_end": "2026-02-15"},
        )

        entries = (await client.get("/api/admin/time-entries")).json()
        assert [e["employee_name"] for e in entries] == ["Ben Ortiz", "Alice Reyes"]

        filtered = (
            await client.get(
                "/api/admin/time-entries",
                params={"start_date": "2026-02-01", "end_date": "2026-02-15"},
            )
        ).json()
        assert [e["work_date"] for e in filtered] == ["2026-02-03"]

        response = await client.delete(f"/api/admin/time-entries/{entry_id}")
        assert response.status_code == 200
        assert len((await client.get("/api/admin/time-entries")).json()) == 1

        invoices = (await client.get("/api/admin/invoices")).json()
        assert len(invoices) == 1
        assert invoices[0]["employee_name"] == "Alice Reyes"
        assert Decimal(invoices[0]["total_payable"]) == Decimal("225")
