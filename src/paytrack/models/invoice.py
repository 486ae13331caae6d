"""Invoice model: the once-only submitted summary of a pay period."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paytrack.calculators.periods import format_for_storage
from paytrack.calculators.types import InvoiceKey
from paytrack.models.base import Base, utcnow

if TYPE_CHECKING:
    from paytrack.models.employee import Employee


class Invoice(Base):
    """Submitted pay period invoice. Never updated after creation."""

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id"),
        nullable=False,
        index=True,
    )
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_wages: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_commissions: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_tips: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_product_commissions: Mapped[Decimal] = mapped_column(
        nullable=False, default=Decimal("0")
    )
    cash_tips_received: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    total_payable: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "pay_period_start",
            "pay_period_end",
            name="invoices_employee_period_unique",
        ),
        Index("idx_invoices_pay_period", "pay_period_start", "pay_period_end"),
    )

    employee: Mapped[Employee] = relationship(back_populates="invoices")

    @property
    def period_start(self) -> date:
        return self.pay_period_start

    @property
    def period_end(self) -> date:
        return self.pay_period_end

    def to_key(self) -> InvoiceKey:
        return InvoiceKey(
            employee_id=self.employee_id,
            period_start=format_for_storage(self.pay_period_start),
            period_end=format_for_storage(self.pay_period_end),
        )
