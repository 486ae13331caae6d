"""Employee model."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paytrack.calculators.types import EmployeeRates
from paytrack.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from paytrack.models.invoice import Invoice
    from paytrack.models.time_entry import TimeEntry


class Employee(Base, TimestampMixin):
    """Employee record with PIN login and pay settings."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    pin: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    hourly_wage: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    commission_rate: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    pay_type: Mapped[str] = mapped_column(String, nullable=False, default="hourly")

    __table_args__ = (
        CheckConstraint("hourly_wage >= 0", name="employees_hourly_wage_check"),
        CheckConstraint("commission_rate >= 0", name="employees_commission_rate_check"),
        CheckConstraint(
            "pay_type IN ('hourly', 'commission', 'hourly_commission')",
            name="employees_pay_type_check",
        ),
    )

    # Relationships
    time_entries: Mapped[list[TimeEntry]] = relationship(back_populates="employee")
    invoices: Mapped[list[Invoice]] = relationship(back_populates="employee")

    def to_rates(self) -> EmployeeRates:
        """Engine view of this employee."""
        return EmployeeRates(
            employee_id=self.id,
            hourly_wage=self.hourly_wage,
            pay_type=self.pay_type,
        )
