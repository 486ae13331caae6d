"""Pay period summary, invoice preview and invoice submission endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from paytrack.api.dependencies import AppSettings, Invoices
from paytrack.api.schemas import (
    DayDetailResponse,
    EmployeeProfile,
    ErrorResponse,
    InvoicePreviewResponse,
    InvoiceResponse,
    InvoiceSubmitRequest,
    PayPeriodResponse,
    SummaryResponse,
)
from paytrack.calculators.earnings import round_to_cents
from paytrack.calculators.periods import (
    effective_end_date,
    format_for_storage,
    today_in_timezone,
)
from paytrack.services import InvalidPayPeriodError, InvoiceAlreadySubmittedError

router = APIRouter(prefix="/employees/{employee_id}", tags=["pay-periods"])

# Two decades either way
MAX_PERIOD_OFFSET = 480


@router.get(
    "/pay-period",
    response_model=PayPeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_pay_period(
    invoices: Invoices,
    settings: AppSettings,
    employee_id: Annotated[int, Path()],
    offset: Annotated[int, Query(ge=-MAX_PERIOD_OFFSET, le=MAX_PERIOD_OFFSET)] = 0,
    reference_date: date | None = None,
) -> PayPeriodResponse:
    """Full summary of a pay period relative to today (or ``reference_date``)."""
    reference = reference_date or today_in_timezone(settings.employer_timezone)
    overview = await invoices.period_overview(employee_id, offset, reference)
    invoice = overview.submitted_invoice

    return PayPeriodResponse(
        period_start=format_for_storage(overview.period.start),
        period_end=format_for_storage(overview.period.end),
        period_label=overview.label,
        period_offset=overview.offset,
        hourly_wage=round_to_cents(overview.employee.hourly_wage),
        summary=SummaryResponse.from_summary(overview.breakdown.summary),
        entries=[DayDetailResponse.from_detail(d) for d in overview.breakdown.days],
        invoice_submitted=overview.invoice_submitted,
        invoice_date=invoice.submitted_at if invoice is not None else None,
    )


@router.get(
    "/invoice-preview",
    response_model=InvoicePreviewResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def preview_invoice(
    invoices: Invoices,
    settings: AppSettings,
    employee_id: Annotated[int, Path()],
    period_start: date,
    period_end: date,
    today: date | None = None,
) -> InvoicePreviewResponse:
    """Preview a period's invoice, leaving out days after today."""
    today = today or today_in_timezone(settings.employer_timezone)
    try:
        preview = await invoices.preview(employee_id, period_start, period_end, today)
    except InvalidPayPeriodError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return InvoicePreviewResponse(
        employee=EmployeeProfile.model_validate(preview.employee),
        period_start=format_for_storage(preview.period.start),
        period_end=format_for_storage(preview.period.end),
        effective_end=format_for_storage(effective_end_date(preview.period, today)),
        entries=[DayDetailResponse.from_detail(d) for d in preview.breakdown.days],
        summary=SummaryResponse.from_summary(preview.breakdown.summary),
    )


@router.post(
    "/invoices",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def submit_invoice(
    invoices: Invoices,
    employee_id: Annotated[int, Path()],
    payload: InvoiceSubmitRequest,
) -> InvoiceResponse:
    """Submit the invoice for a pay period. Only once per period."""
    try:
        invoice = await invoices.submit(employee_id, payload.period_start, payload.period_end)
    except InvalidPayPeriodError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except InvoiceAlreadySubmittedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Invoice already submitted for this pay period",
        )
    return InvoiceResponse.model_validate(invoice)
