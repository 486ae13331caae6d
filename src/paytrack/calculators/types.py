"""Type definitions for the earnings engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any


class PayType(str, Enum):
    """Employee pay types."""

    HOURLY = "hourly"
    COMMISSION = "commission"
    HOURLY_COMMISSION = "hourly_commission"


@dataclass(frozen=True)
class PayPeriod:
    """A semi-monthly pay period (inclusive bounds)."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def start_key(self) -> str:
        """Canonical storage form of the start date."""
        return self.start.isoformat()

    @property
    def end_key(self) -> str:
        """Canonical storage form of the end date."""
        return self.end.isoformat()


@dataclass(frozen=True)
class EmployeeRates:
    """The slice of an employee record the engine needs."""

    employee_id: int
    hourly_wage: Decimal | None = None
    pay_type: str = PayType.HOURLY.value


@dataclass(frozen=True)
class ClientEntryRecord:
    """A service performed for one client within a time entry."""

    client_name: str
    procedure_name: str | None = None
    notes: str | None = None
    amount_earned: Decimal | None = None
    tip_amount: Decimal | None = None
    tip_received_cash: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "client_name": self.client_name,
            "procedure_name": self.procedure_name,
            "notes": self.notes,
            "amount_earned": self.amount_earned,
            "tip_amount": self.tip_amount,
            "tip_received_cash": self.tip_received_cash,
        }


@dataclass(frozen=True)
class ProductSaleRecord:
    """A product sale within a time entry."""

    product_name: str
    sale_amount: Decimal | None = None
    commission_amount: Decimal | None = None
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_name": self.product_name,
            "sale_amount": self.sale_amount,
            "commission_amount": self.commission_amount,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class TimeEntryRecord:
    """Snapshot of one day's time entry with its children."""

    entry_id: int | None
    employee_id: int
    work_date: date
    hours: Decimal | None = None
    start_time: str | None = None
    end_time: str | None = None
    break_minutes: int = 0
    clients: tuple[ClientEntryRecord, ...] = ()
    product_sales: tuple[ProductSaleRecord, ...] = ()


@dataclass(frozen=True)
class EarningsSummary:
    """Totals for one employee over a set of time entries."""

    total_hours: Decimal = Decimal("0")
    total_wages: Decimal = Decimal("0")
    total_commissions: Decimal = Decimal("0")
    total_tips: Decimal = Decimal("0")
    total_cash_tips_received: Decimal = Decimal("0")
    total_product_commissions: Decimal = Decimal("0")
    total_payable: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Decimal]:
        return {
            "total_hours": self.total_hours,
            "total_wages": self.total_wages,
            "total_commissions": self.total_commissions,
            "total_tips": self.total_tips,
            "total_cash_tips_received": self.total_cash_tips_received,
            "total_product_commissions": self.total_product_commissions,
            "total_payable": self.total_payable,
        }


@dataclass(frozen=True)
class DayDetail:
    """Per-entry earnings row."""

    entry_id: int | None
    work_date: date
    start_time: str | None
    end_time: str | None
    hours: Decimal
    wages: Decimal
    commissions: Decimal
    tips: Decimal
    cash_tips: Decimal
    product_commissions: Decimal
    clients: tuple[ClientEntryRecord, ...] = ()
    product_sales: tuple[ProductSaleRecord, ...] = ()


@dataclass(frozen=True)
class PeriodBreakdown:
    """Summary plus day-level detail for one employee and period."""

    period: PayPeriod
    summary: EarningsSummary
    days: tuple[DayDetail, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InvoiceKey:
    """Identity of a submitted invoice: employee and exact period bounds."""

    employee_id: int
    period_start: str
    period_end: str
