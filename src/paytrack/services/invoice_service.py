"""Pay period summaries and once-only invoice submission."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from paytrack.calculators.earnings import (
    can_submit,
    full_period_summary,
    preview_up_to_today,
    round_to_cents,
)
from paytrack.calculators.periods import (
    effective_end_date,
    is_pay_period,
    label,
    period_by_offset,
    to_local_date,
)
from paytrack.calculators.types import EmployeeRates, InvoiceKey, PayPeriod, PeriodBreakdown
from paytrack.database import unit_of_work
from paytrack.models import Employee, Invoice
from paytrack.services.employee_service import EmployeeService
from paytrack.services.time_entry_service import TimeEntryService

logger = logging.getLogger(__name__)


class InvoiceAlreadySubmittedError(Exception):
    """Raised when an invoice already exists for the employee and period."""

    def __init__(self, employee_id: int, period: PayPeriod):
        self.employee_id = employee_id
        self.period = period
        super().__init__(
            f"Invoice already submitted for employee {employee_id}, "
            f"period {period.start_key} to {period.end_key}"
        )


class InvalidPayPeriodError(Exception):
    """Raised when a date range is not usable as a pay period."""

    def __init__(self, start: date, end: date, reason: str):
        self.start = start
        self.end = end
        super().__init__(f"{start.isoformat()} to {end.isoformat()}: {reason}")


@dataclass(frozen=True)
class PayPeriodOverview:
    """Full-period summary for one employee with its submission status."""

    employee: EmployeeRates
    offset: int
    label: str
    breakdown: PeriodBreakdown
    submitted_invoice: Invoice | None

    @property
    def period(self) -> PayPeriod:
        return self.breakdown.period

    @property
    def invoice_submitted(self) -> bool:
        return self.submitted_invoice is not None


@dataclass(frozen=True)
class InvoicePreview:
    """Preview of a period in progress, with the employee it was computed for."""

    employee: Employee
    breakdown: PeriodBreakdown

    @property
    def period(self) -> PayPeriod:
        return self.breakdown.period


class InvoiceService:
    """Service for period summaries and invoice persistence.

    Key invariants:
    1. At most one invoice per (employee, period start, period end); the
       unique constraint is authoritative, the pre-check is a fast path
    2. Submitted totals are recomputed here from stored entries over the
       whole period, never clamped to today
    3. Invoices are never updated once written
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.employees = EmployeeService(session)
        self.time_entries = TimeEntryService(session)

    async def existing_invoices(self, employee_id: int, period: PayPeriod) -> list[Invoice]:
        """Invoices stored for the employee with exactly these bounds."""
        result = await self.session.execute(
            select(Invoice).where(
                Invoice.employee_id == employee_id,
                Invoice.pay_period_start == period.start,
                Invoice.pay_period_end == period.end,
            )
        )
        return list(result.scalars().all())

    async def can_submit(self, employee_id: int, period: PayPeriod) -> bool:
        """Whether the employee may still submit an invoice for the period."""
        invoices = await self.existing_invoices(employee_id, period)
        keys: list[InvoiceKey] = [invoice.to_key() for invoice in invoices]
        return can_submit(employee_id, period, keys)

    async def period_overview(
        self,
        employee_id: int,
        offset: int,
        reference_date: date | datetime | str,
    ) -> PayPeriodOverview:
        """Full summary of the period ``offset`` periods from the reference date."""
        employee = (await self.employees.get(employee_id)).to_rates()
        period = period_by_offset(offset, reference_date)

        records = await self.time_entries.records_in_range(employee_id, period.start, period.end)
        breakdown = full_period_summary(employee, records, period)
        invoices = await self.existing_invoices(employee_id, period)

        return PayPeriodOverview(
            employee=employee,
            offset=offset,
            label=label(period),
            breakdown=breakdown,
            submitted_invoice=invoices[0] if invoices else None,
        )

    async def preview(
        self,
        employee_id: int,
        period_start: date | datetime | str,
        period_end: date | datetime | str,
        today: date | datetime | str,
    ) -> InvoicePreview:
        """Preview a period up to today, newest day first.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            InvalidPayPeriodError: If the range ends before it starts
        """
        employee = await self.employees.get(employee_id)
        period = PayPeriod(start=to_local_date(period_start), end=to_local_date(period_end))
        if period.end < period.start:
            raise InvalidPayPeriodError(period.start, period.end, "period ends before it starts")

        cutoff = effective_end_date(period, today)
        records = await self.time_entries.records_in_range(employee_id, period.start, cutoff)
        breakdown = preview_up_to_today(employee.to_rates(), records, period, today)
        return InvoicePreview(employee=employee, breakdown=breakdown)

    async def submit(
        self,
        employee_id: int,
        period_start: date | datetime | str,
        period_end: date | datetime | str,
    ) -> Invoice:
        """Create the invoice for a pay period.

        Raises:
            InvalidPayPeriodError: If the bounds are not exactly one pay period
            EmployeeNotFoundError: If the employee does not exist
            InvoiceAlreadySubmittedError: If an invoice already exists
        """
        start = to_local_date(period_start)
        end = to_local_date(period_end)
        if not is_pay_period(start, end):
            raise InvalidPayPeriodError(start, end, "not a semi-monthly pay period")
        period = PayPeriod(start=start, end=end)

        if not await self.can_submit(employee_id, period):
            logger.warning(
                "Rejected duplicate invoice for employee %s, period %s to %s",
                employee_id, period.start_key, period.end_key,
            )
            raise InvoiceAlreadySubmittedError(employee_id, period)

        employee = (await self.employees.get(employee_id)).to_rates()
        records = await self.time_entries.records_in_range(employee_id, start, end)
        summary = full_period_summary(employee, records, period).summary

        invoice = Invoice(
            employee_id=employee_id,
            pay_period_start=start,
            pay_period_end=end,
            total_hours=round_to_cents(summary.total_hours),
            total_wages=round_to_cents(summary.total_wages),
            total_commissions=round_to_cents(summary.total_commissions),
            total_tips=round_to_cents(summary.total_tips),
            total_product_commissions=round_to_cents(summary.total_product_commissions),
            cash_tips_received=round_to_cents(summary.total_cash_tips_received),
            total_payable=round_to_cents(summary.total_payable),
            email_sent=False,
        )

        try:
            async with unit_of_work(self.session):
                self.session.add(invoice)
                await self.session.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent submission for the same key
            logger.warning(
                "Duplicate invoice insert for employee %s, period %s to %s",
                employee_id, period.start_key, period.end_key,
            )
            raise InvoiceAlreadySubmittedError(employee_id, period) from exc

        logger.info(
            "Invoice %s submitted for employee %s, period %s to %s, total payable %s",
            invoice.id, employee_id, period.start_key, period.end_key,
            invoice.total_payable,
        )
        return invoice

    async def list_invoices(self) -> list[tuple[Invoice, str]]:
        """All invoices with employee names, most recently submitted first."""
        result = await self.session.execute(
            select(Invoice, Employee.name)
            .join(Employee, Invoice.employee_id == Employee.id)
            .order_by(Invoice.submitted_at.desc(), Invoice.id.desc())
        )
        return [(invoice, name) for invoice, name in result.all()]
