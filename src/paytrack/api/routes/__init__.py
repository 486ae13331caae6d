"""API routes."""

from paytrack.api.routes.admin import router as admin_router
from paytrack.api.routes.employees import router as employees_router
from paytrack.api.routes.health import router as health_router
from paytrack.api.routes.pay_periods import router as pay_periods_router
from paytrack.api.routes.time_entries import router as time_entries_router

__all__ = [
    "admin_router",
    "employees_router",
    "health_router",
    "pay_periods_router",
    "time_entries_router",
]
