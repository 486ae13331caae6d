"""PayTrack services."""

from paytrack.services.employee_service import (
    EmployeeNotFoundError,
    EmployeeService,
    InvalidPinError,
    PinConflictError,
)
from paytrack.services.invoice_service import (
    InvalidPayPeriodError,
    InvoiceAlreadySubmittedError,
    InvoicePreview,
    InvoiceService,
    PayPeriodOverview,
)
from paytrack.services.time_entry_service import (
    TimeEntryConflictError,
    TimeEntryNotFoundError,
    TimeEntryService,
)

__all__ = [
    "EmployeeService",
    "EmployeeNotFoundError",
    "InvalidPinError",
    "PinConflictError",
    "InvoiceService",
    "InvoiceAlreadySubmittedError",
    "InvalidPayPeriodError",
    "InvoicePreview",
    "PayPeriodOverview",
    "TimeEntryService",
    "TimeEntryConflictError",
    "TimeEntryNotFoundError",
]
