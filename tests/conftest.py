"""
Pytest configuration and fixtures.

WHY: Fixtures provide reusable test setup/teardown logic, reducing
duplication and ensuring consistent test environments.
"""

import os

# Settings are read at import time; the app must never see real credentials
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-unit-tests-only")
os.environ.setdefault("XENDIT_API_KEY", "xnd_development_test_key")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from xendit_payments.main import app
from xendit_payments.models.base import Base
from xendit_payments.db.session import get_db
from xendit_payments.core.config import XenditOptions
from xendit_payments.core.deps import get_xendit_options
from xendit_payments.services.xendit_handler import XENDIT_HANDLER_CODE
from tests.factories import (
    ChannelFactory,
    CustomerFactory,
    OrderFactory,
    PaymentMethodFactory,
)


# Test database URL
# WHY: Using SQLite for tests eliminates external database dependencies
# and makes tests faster.
TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_CALLBACK_TOKEN = "xyz"
TEST_CHANNEL_TOKEN = "tenant1"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """
    Create a test database engine.

    WHY: Function scope ensures each test gets a fresh database state,
    preventing test pollution and ensuring test isolation. StaticPool keeps
    the single in-memory database alive across connections.
    """
    engine = create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session.

    Yields:
        AsyncSession: Database session for the test
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def xendit_options() -> XenditOptions:
    """Xendit options with a configured callback token."""
    return XenditOptions(
        api_key="xnd_development_test_key",
        callback_token=TEST_CALLBACK_TOKEN,
        invoice_duration=3600,
        payment_methods=("BCA", "OVO"),
        base_url="https://api.xendit.test",
        currency="IDR",
        timeout=5.0,
    )


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    xendit_options: XenditOptions,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test HTTP client.

    WHY: AsyncClient allows testing FastAPI endpoints without running
    a real server, making tests faster and more reliable.

    Yields:
        AsyncClient: HTTP client for making test requests
    """

    async def override_get_db():
        """Override database dependency with test session."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_xendit_options] = lambda: xendit_options

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_channel(db_session: AsyncSession):
    """Channel whose token is encoded in invoice descriptions."""
    return await ChannelFactory.create(db_session, code="default", token=TEST_CHANNEL_TOKEN)


@pytest_asyncio.fixture
async def test_customer(db_session: AsyncSession):
    return await CustomerFactory.create(db_session)


@pytest_asyncio.fixture
async def xendit_method(db_session: AsyncSession, test_channel):
    """Payment method bound to the Xendit handler."""
    return await PaymentMethodFactory.create(
        db_session,
        channel=test_channel,
        code="xendit",
        handler_code=XENDIT_HANDLER_CODE,
    )


@pytest_asyncio.fixture
async def test_order(db_session: AsyncSession, test_channel, test_customer):
    """Order ORD123 still adding items, 150000 IDR."""
    return await OrderFactory.create(
        db_session,
        channel=test_channel,
        customer=test_customer,
        code="ORD123",
        total_with_tax=150000,
    )
