"""SQLAlchemy ORM models."""

from paytrack.models.base import Base, TimestampMixin
from paytrack.models.employee import Employee
from paytrack.models.invoice import Invoice
from paytrack.models.time_entry import ClientEntry, ProductSale, TimeEntry

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "TimeEntry",
    "ClientEntry",
    "ProductSale",
    "Invoice",
]
