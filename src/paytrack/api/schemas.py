"""Pydantic schemas for API request/response models.

Money fields in responses are rounded to cents when built; the engine's
values themselves are never rounded.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from paytrack.calculators.earnings import round_to_cents
from paytrack.calculators.types import (
    ClientEntryRecord,
    DayDetail,
    EarningsSummary,
    PayType,
    ProductSaleRecord,
)


class ErrorResponse(BaseModel):
    """Error body."""

    detail: str
    code: str | None = None


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeProfile(BaseModel):
    """Employee as seen by the employee app."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    hourly_wage: Decimal
    commission_rate: Decimal
    pay_type: str


class EmployeeAdminResponse(EmployeeProfile):
    """Employee as seen by the admin panel (includes PIN)."""

    pin: str
    created_at: datetime | None = None


class VerifyPinRequest(BaseModel):
    pin: str = Field(min_length=1)


class ChangePinRequest(BaseModel):
    current_pin: str = Field(min_length=1)
    new_pin: str = Field(min_length=1)


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    name: str = Field(min_length=1)
    pin: str = Field(min_length=1)
    email: str | None = None
    hourly_wage: Decimal = Field(default=Decimal("0"), ge=0)
    commission_rate: Decimal = Field(default=Decimal("0"), ge=0)
    pay_type: PayType = PayType.HOURLY


class EmployeeUpdate(EmployeeCreate):
    """Schema for replacing an employee's details."""


class CreatedResponse(BaseModel):
    id: int


class SuccessResponse(BaseModel):
    success: bool
    message: str | None = None


class AdminVerifyRequest(BaseModel):
    password: str


# ============================================================================
# Time entry schemas
# ============================================================================


class ClientEntryIn(BaseModel):
    """A client service within a new time entry."""

    client_name: str = Field(min_length=1)
    procedure_name: str | None = None
    notes: str | None = None
    amount_earned: Decimal | None = Field(default=None, ge=0)
    tip_amount: Decimal | None = Field(default=None, ge=0)
    tip_received_cash: bool = False

    def to_record(self) -> ClientEntryRecord:
        return ClientEntryRecord(
            client_name=self.client_name,
            procedure_name=self.procedure_name,
            notes=self.notes,
            amount_earned=self.amount_earned,
            tip_amount=self.tip_amount,
            tip_received_cash=self.tip_received_cash,
        )


class ProductSaleIn(BaseModel):
    """A product sale within a new time entry."""

    product_name: str = Field(min_length=1)
    sale_amount: Decimal | None = Field(default=None, ge=0)
    commission_amount: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None

    def to_record(self) -> ProductSaleRecord:
        return ProductSaleRecord(
            product_name=self.product_name,
            sale_amount=self.sale_amount,
            commission_amount=self.commission_amount,
            notes=self.notes,
        )


class TimeEntryCreate(BaseModel):
    """Schema for submitting a day's time entry."""

    work_date: date
    hours: Decimal = Field(ge=0)
    start_time: str | None = None
    end_time: str | None = None
    break_minutes: int = Field(default=0, ge=0)
    description: str | None = None
    clients: list[ClientEntryIn] = Field(default_factory=list)
    product_sales: list[ProductSaleIn] = Field(default_factory=list)
    replace_existing: bool = False


class ClientEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_name: str
    procedure_name: str | None = None
    notes: str | None = None
    amount_earned: Decimal | None = None
    tip_amount: Decimal | None = None
    tip_received_cash: bool = False


class ProductSaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_name: str
    sale_amount: Decimal | None = None
    commission_amount: Decimal | None = None
    notes: str | None = None


class TimeEntryResponse(BaseModel):
    """A stored time entry with its children."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    work_date: date
    start_time: str | None = None
    end_time: str | None = None
    break_minutes: int = 0
    hours: Decimal
    description: str | None = None
    created_at: datetime | None = None
    clients: list[ClientEntryResponse] = Field(default_factory=list)
    product_sales: list[ProductSaleResponse] = Field(default_factory=list)


class AdminTimeEntryResponse(TimeEntryResponse):
    """Time entry with employee details for the admin panel."""

    employee_name: str
    hourly_wage: Decimal
    commission_rate: Decimal
    pay_type: str


class ConflictResponse(BaseModel):
    """Whether an entry already exists for a date."""

    has_conflict: bool
    existing_entry: TimeEntryResponse | None = None


# ============================================================================
# Pay period schemas
# ============================================================================


class SummaryResponse(BaseModel):
    """Period totals, rounded for display."""

    total_hours: Decimal
    total_wages: Decimal
    total_commissions: Decimal
    total_tips: Decimal
    total_cash_tips_received: Decimal
    total_product_commissions: Decimal
    total_payable: Decimal

    @classmethod
    def from_summary(cls, summary: EarningsSummary) -> "SummaryResponse":
        return cls(**{key: round_to_cents(value) for key, value in summary.to_dict().items()})


class DayDetailResponse(BaseModel):
    """One day's earnings, rounded for display."""

    entry_id: int | None
    work_date: date
    start_time: str | None = None
    end_time: str | None = None
    hours: Decimal
    wages: Decimal
    commissions: Decimal
    product_commissions: Decimal
    tips: Decimal
    cash_tips: Decimal
    clients: list[ClientEntryResponse] = Field(default_factory=list)
    product_sales: list[ProductSaleResponse] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, day: DayDetail) -> "DayDetailResponse":
        return cls(
            entry_id=day.entry_id,
            work_date=day.work_date,
            start_time=day.start_time,
            end_time=day.end_time,
            hours=round_to_cents(day.hours),
            wages=round_to_cents(day.wages),
            commissions=round_to_cents(day.commissions),
            product_commissions=round_to_cents(day.product_commissions),
            tips=round_to_cents(day.tips),
            cash_tips=round_to_cents(day.cash_tips),
            clients=[ClientEntryResponse(**c.to_dict()) for c in day.clients],
            product_sales=[ProductSaleResponse(**s.to_dict()) for s in day.product_sales],
        )


class PayPeriodResponse(BaseModel):
    """Full-period summary for the employee app."""

    period_start: str
    period_end: str
    period_label: str
    period_offset: int
    hourly_wage: Decimal
    summary: SummaryResponse
    entries: list[DayDetailResponse]
    invoice_submitted: bool
    invoice_date: datetime | None = None


class InvoicePreviewResponse(BaseModel):
    """Preview of a period up to today, newest day first."""

    employee: EmployeeProfile
    period_start: str
    period_end: str
    effective_end: str
    entries: list[DayDetailResponse]
    summary: SummaryResponse


class InvoiceSubmitRequest(BaseModel):
    period_start: date
    period_end: date


class InvoiceResponse(BaseModel):
    """A stored invoice."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    pay_period_start: date
    pay_period_end: date
    total_hours: Decimal
    total_wages: Decimal
    total_commissions: Decimal
    total_tips: Decimal
    total_product_commissions: Decimal
    cash_tips_received: Decimal
    total_payable: Decimal
    submitted_at: datetime
    email_sent: bool
    employee_name: str | None = None
