"""Earnings aggregation for pay periods.

Reduces time-entry snapshots (with their client entries and product sales)
to period totals and per-day rows.

Rules:
- Decimal arithmetic throughout, no rounding while accumulating
- Missing amounts count as zero
- Cash tips were paid out at the time of service, so they are subtracted
  from the payable total
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from paytrack.calculators.periods import effective_end_date, format_for_storage
from paytrack.calculators.types import (
    DayDetail,
    EarningsSummary,
    EmployeeRates,
    PayPeriod,
    PeriodBreakdown,
    TimeEntryRecord,
)

ZERO = Decimal("0")
OUTPUT_PRECISION = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Convert a stored amount to Decimal, treating missing values as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to_cents(amount: Decimal) -> Decimal:
    """Round to 2 decimal places for display. Never used while summing."""
    return to_decimal(amount).quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def _day_detail(employee: EmployeeRates, entry: TimeEntryRecord) -> DayDetail:
    hours = to_decimal(entry.hours)
    commissions = ZERO
    tips = ZERO
    cash_tips = ZERO
    product_commissions = ZERO

    for client in entry.clients:
        tip = to_decimal(client.tip_amount)
        commissions += to_decimal(client.amount_earned)
        tips += tip
        if client.tip_received_cash:
            cash_tips += tip

    for sale in entry.product_sales:
        product_commissions += to_decimal(sale.commission_amount)

    return DayDetail(
        entry_id=entry.entry_id,
        work_date=entry.work_date,
        start_time=entry.start_time,
        end_time=entry.end_time,
        hours=hours,
        wages=hours * to_decimal(employee.hourly_wage),
        commissions=commissions,
        tips=tips,
        cash_tips=cash_tips,
        product_commissions=product_commissions,
        clients=tuple(entry.clients),
        product_sales=tuple(entry.product_sales),
    )


def _summarize_days(employee: EmployeeRates, days: Iterable[DayDetail]) -> EarningsSummary:
    total_hours = ZERO
    total_commissions = ZERO
    total_tips = ZERO
    total_cash_tips = ZERO
    total_product_commissions = ZERO

    for day in days:
        total_hours += day.hours
        total_commissions += day.commissions
        total_tips += day.tips
        total_cash_tips += day.cash_tips
        total_product_commissions += day.product_commissions

    total_wages = total_hours * to_decimal(employee.hourly_wage)
    total_payable = (
        total_wages
        + total_commissions
        + total_tips
        + total_product_commissions
        - total_cash_tips
    )

    return EarningsSummary(
        total_hours=total_hours,
        total_wages=total_wages,
        total_commissions=total_commissions,
        total_tips=total_tips,
        total_cash_tips_received=total_cash_tips,
        total_product_commissions=total_product_commissions,
        total_payable=total_payable,
    )


def summarize(employee: EmployeeRates, entries: Iterable[TimeEntryRecord]) -> EarningsSummary:
    """Sum all earning components over entries already scoped to one period."""
    return _summarize_days(employee, (_day_detail(employee, e) for e in entries))


def detailed_breakdown(
    employee: EmployeeRates,
    entries: Iterable[TimeEntryRecord],
    descending: bool = False,
) -> list[DayDetail]:
    """One earnings row per time entry, ordered by date.

    Entries sharing a date keep their input order.
    """
    days = [_day_detail(employee, e) for e in entries]
    if descending:
        # Reverse-sort on a key that keeps ties in input order
        indexed = sorted(
            enumerate(days), key=lambda pair: (pair[1].work_date, -pair[0]), reverse=True
        )
        return [day for _, day in indexed]
    return sorted(days, key=lambda day: day.work_date)


def full_period_summary(
    employee: EmployeeRates,
    entries: Iterable[TimeEntryRecord],
    period: PayPeriod,
) -> PeriodBreakdown:
    """Authoritative summary over the whole period, used for invoice submission."""
    in_period = [e for e in entries if period.contains(e.work_date)]
    days = detailed_breakdown(employee, in_period)
    return PeriodBreakdown(
        period=period,
        summary=_summarize_days(employee, days),
        days=tuple(days),
    )


def preview_up_to_today(
    employee: EmployeeRates,
    entries: Iterable[TimeEntryRecord],
    period: PayPeriod,
    today: date | datetime | str,
) -> PeriodBreakdown:
    """Preview of a period in progress: entries after today are left out.

    Rows are newest first.
    """
    cutoff = effective_end_date(period, today)
    visible = [e for e in entries if period.start <= e.work_date <= cutoff]
    days = detailed_breakdown(employee, visible, descending=True)
    return PeriodBreakdown(
        period=period,
        summary=_summarize_days(employee, days),
        days=tuple(days),
    )


def _bound_key(value: Any) -> str:
    if isinstance(value, str):
        return value
    return format_for_storage(value)


def can_submit(
    employee_id: int,
    period: PayPeriod,
    existing_invoices: Sequence[Any],
) -> bool:
    """True iff no invoice exists for this employee and exact period bounds.

    ``existing_invoices`` may hold anything exposing ``employee_id``,
    ``period_start`` and ``period_end`` (InvoiceKey, ORM rows). String bounds
    are storage keys and must match ``YYYY-MM-DD`` exactly; date bounds are
    formatted to that form first.
    """
    start_key = format_for_storage(period.start)
    end_key = format_for_storage(period.end)
    for invoice in existing_invoices:
        if (
            invoice.employee_id == employee_id
            and _bound_key(invoice.period_start) == start_key
            and _bound_key(invoice.period_end) == end_key
        ):
            return False
    return True
