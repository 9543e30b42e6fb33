"""Pytest configuration and shared fixtures."""

import os
from datetime import date, datetime
from typing import Optional

import pytest
import pytest_asyncio

# Set required environment variables for testing BEFORE importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PENDING_STATUS", "New Registered")

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.core.database import DatabaseClient
from quickflex_admin.database.models import (
    BackgroundCheck,
    BankingDetails,
    Driver,
    Insurance,
    Vehicle,
)
from quickflex_admin.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def db_client():
    """In-memory SQLite client with all tables created."""
    client = DatabaseClient.from_url(TEST_DATABASE_URL)
    await client.create_tables()
    yield client
    await client.disconnect()


@pytest_asyncio.fixture
async def db_session(db_client: DatabaseClient):
    async with db_client.session() as session:
        yield session


class Seeder:
    """Inserts drivers and satellite records for tests."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._vin_counter = 0

    async def _save(self, instance):
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

    async def driver(
        self,
        first_name: str = "Ada",
        last_name: str = "Lovelace",
        status: str = "New Registered",
        registration_date: Optional[datetime] = None,
        **fields,
    ) -> Driver:
        return await self._save(
            Driver(
                first_name=first_name,
                last_name=last_name,
                status=status,
                registration_date=registration_date or datetime(2024, 1, 1, 9, 0, 0),
                email=fields.pop("email", f"{first_name.lower()}@example.com"),
                **fields,
            )
        )

    async def vehicle(self, driver: Driver, inspection_date: Optional[date] = None, **fields) -> Vehicle:
        self._vin_counter += 1
        fields.setdefault("vin", f"1HGCM82633A{self._vin_counter:06d}")
        fields.setdefault("make", "Toyota")
        return await self._save(
            Vehicle(driver_id=driver.driver_id, inspection_date=inspection_date, **fields)
        )

    async def background_check(
        self, driver: Driver, check_date: Optional[date] = None, **fields
    ) -> BackgroundCheck:
        fields.setdefault("result", "clear")
        return await self._save(
            BackgroundCheck(driver_id=driver.driver_id, check_date=check_date, **fields)
        )

    async def insurance(self, driver: Driver, start_date: Optional[date] = None, **fields) -> Insurance:
        fields.setdefault("policy_number", "POL-0001")
        return await self._save(
            Insurance(driver_id=driver.driver_id, start_date=start_date, **fields)
        )

    async def banking(self, driver: Driver, **fields) -> BankingDetails:
        fields.setdefault("bank_name", "First Bank")
        fields.setdefault("account_number", "000123456789")
        return await self._save(BankingDetails(driver_id=driver.driver_id, **fields))


@pytest.fixture
def seed(db_session) -> Seeder:
    return Seeder(db_session)
