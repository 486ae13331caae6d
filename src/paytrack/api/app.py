"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from paytrack import __version__
from paytrack.api.routes import (
    admin_router,
    employees_router,
    health_router,
    pay_periods_router,
    time_entries_router,
)
from paytrack.calculators.periods import InvalidDateError
from paytrack.config import get_settings
from paytrack.database import create_schema, dispose_db, init_db
from paytrack.services import EmployeeNotFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    engine, _ = init_db()
    if get_settings().create_schema:
        await create_schema(engine)
        logger.info("Database schema ensured")
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PayTrack API",
        description="Employee hours, commissions and pay period invoices",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(EmployeeNotFoundError)
    async def employee_not_found_handler(
        request: Request, exc: EmployeeNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "EMPLOYEE_NOT_FOUND"},
        )

    @app.exception_handler(InvalidDateError)
    async def invalid_date_handler(request: Request, exc: InvalidDateError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "code": "INVALID_DATE"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router, prefix="/api")
    app.include_router(employees_router, prefix="/api")
    app.include_router(time_entries_router, prefix="/api")
    app.include_router(pay_periods_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    return app


# Default app instance for uvicorn
app = create_app()
