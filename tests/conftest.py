"""Pytest fixtures for PayTrack tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from paytrack.api.app import create_app
from paytrack.api.dependencies import get_db_session
from paytrack.calculators.types import ClientEntryRecord, ProductSaleRecord
from paytrack.config import Settings, get_settings
from paytrack.database import make_session_factory
from paytrack.models import Base, Employee

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "letmein"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        employer_timezone="America/Los_Angeles",
        admin_password=ADMIN_PASSWORD,
        app_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        create_schema=False,
    )


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Database session for each test."""
    factory = make_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def employee(session: AsyncSession) -> Employee:
    """An hourly employee paid $20/hour."""
    employee = Employee(
        name="Alice Reyes",
        pin="1234",
        email="alice@example.com",
        hourly_wage=Decimal("20.00"),
        commission_rate=Decimal("0"),
        pay_type="hourly_commission",
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest_asyncio.fixture
async def other_employee(session: AsyncSession) -> Employee:
    employee = Employee(
        name="Ben Ortiz",
        pin="5678",
        hourly_wage=Decimal("15.00"),
        pay_type="hourly",
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest.fixture
def app(engine: AsyncEngine, test_settings: Settings) -> Generator[FastAPI, None, None]:
    """App bound to the test database and settings."""
    app = create_app()
    factory = make_session_factory(engine)

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_settings] = lambda: test_settings

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def client_service(
    name: str = "Client A",
    earned: str | None = "50",
    tip: str | None = "10",
    cash: bool = False,
) -> ClientEntryRecord:
    return ClientEntryRecord(
        client_name=name,
        procedure_name="Haircut",
        amount_earned=Decimal(earned) if earned is not None else None,
        tip_amount=Decimal(tip) if tip is not None else None,
        tip_received_cash=cash,
    )


def product_sale(commission: str = "5", sale: str = "40") -> ProductSaleRecord:
    return ProductSaleRecord(
        product_name="Shampoo",
        sale_amount=Decimal(sale),
        commission_amount=Decimal(commission),
    )


FEB_FIRST_HALF = (date(2026, 2, 1), date(2026, 2, 15))
