"""Time entry models: a day's hours plus its client services and product sales.

Children are owned by exactly one time entry and are never referenced
elsewhere. There is no database-level cascade; the time entry service
deletes children before the parent.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paytrack.calculators.types import ClientEntryRecord, ProductSaleRecord, TimeEntryRecord
from paytrack.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from paytrack.models.employee import Employee


class TimeEntry(Base, TimestampMixin):
    """Hours worked on one calendar date."""

    __tablename__ = "time_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id"),
        nullable=False,
        index=True,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str | None] = mapped_column(String, nullable=True)
    end_time: Mapped[str | None] = mapped_column(String, nullable=True)
    break_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hours: Mapped[Decimal] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("hours >= 0", name="time_entries_hours_check"),
        CheckConstraint("break_minutes >= 0", name="time_entries_break_minutes_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="time_entries")
    clients: Mapped[list[ClientEntry]] = relationship(
        back_populates="time_entry", order_by="ClientEntry.id"
    )
    product_sales: Mapped[list[ProductSale]] = relationship(
        back_populates="time_entry", order_by="ProductSale.id"
    )

    def to_record(self) -> TimeEntryRecord:
        """Snapshot for the earnings engine. Children must be loaded."""
        return TimeEntryRecord(
            entry_id=self.id,
            employee_id=self.employee_id,
            work_date=self.work_date,
            hours=self.hours,
            start_time=self.start_time,
            end_time=self.end_time,
            break_minutes=self.break_minutes or 0,
            clients=tuple(c.to_record() for c in self.clients),
            product_sales=tuple(s.to_record() for s in self.product_sales),
        )


class ClientEntry(Base, TimestampMixin):
    """Service commission and tip for one client."""

    __tablename__ = "client_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    time_entry_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("time_entries.id"),
        nullable=False,
        index=True,
    )
    client_name: Mapped[str] = mapped_column(String, nullable=False)
    procedure_name: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount_earned: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    tip_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    tip_received_cash: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("amount_earned >= 0", name="client_entries_amount_check"),
        CheckConstraint("tip_amount >= 0", name="client_entries_tip_check"),
    )

    time_entry: Mapped[TimeEntry] = relationship(back_populates="clients")

    def to_record(self) -> ClientEntryRecord:
        return ClientEntryRecord(
            client_name=self.client_name,
            procedure_name=self.procedure_name,
            notes=self.notes,
            amount_earned=self.amount_earned,
            tip_amount=self.tip_amount,
            tip_received_cash=bool(self.tip_received_cash),
        )


class ProductSale(Base, TimestampMixin):
    """Product sold during a shift, with the employee's commission."""

    __tablename__ = "product_sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    time_entry_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("time_entries.id"),
        nullable=False,
        index=True,
    )
    product_name: Mapped[str] = mapped_column(String, nullable=False)
    sale_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    commission_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("sale_amount >= 0", name="product_sales_sale_check"),
        CheckConstraint("commission_amount >= 0", name="product_sales_commission_check"),
    )

    time_entry: Mapped[TimeEntry] = relationship(back_populates="product_sales")

    def to_record(self) -> ProductSaleRecord:
        return ProductSaleRecord(
            product_name=self.product_name,
            sale_amount=self.sale_amount,
            commission_amount=self.commission_amount,
            notes=self.notes,
        )
