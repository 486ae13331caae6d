"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from paytrack.config import Settings, get_settings
from paytrack.database import init_db
from paytrack.services import EmployeeService, InvoiceService, TimeEntryService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_employee_service(db: DbSession) -> EmployeeService:
    return EmployeeService(db)


def get_time_entry_service(db: DbSession) -> TimeEntryService:
    return TimeEntryService(db)


def get_invoice_service(db: DbSession) -> InvoiceService:
    return InvoiceService(db)


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
Employees = Annotated[EmployeeService, Depends(get_employee_service)]
TimeEntries = Annotated[TimeEntryService, Depends(get_time_entry_service)]
Invoices = Annotated[InvoiceService, Depends(get_invoice_service)]
