"""
Test fixtures for the Allowance Bank test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - client: Async HTTP test client wired to the test database
  - set_balance: Provision the singleton balance row with a given amount
  - add_transaction: Insert a ledger row directly, the way the external
    allowance trigger writes deposits

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) with a StaticPool, so every
    session in a test shares the one connection and sees the same data.
    Each test still gets a completely fresh database.
  - We override FastAPI's get_db dependency to inject a session bound to the
    test engine, so the application code runs exactly as in production.
  - The ASGI transport does not run the lifespan, so the balance row is
    provisioned explicitly by the tests that need it.
"""

from datetime import datetime, timezone

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from allowance_bank.database import Base, get_db
from allowance_bank.main import app
from allowance_bank.models.balance import Balance
from allowance_bank.models.transaction import Transaction


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    Async HTTP test client with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def set_balance(session_factory):
    """
    Provision (or overwrite) the balance row.

    Usage:
        await set_balance(5000)   # $50.00
    """

    async def _set_balance(amount_cents: int) -> None:
        async with session_factory() as session:
            balance = await session.get(Balance, Balance.SINGLETON_ID)
            if balance is None:
                session.add(Balance(id=Balance.SINGLETON_ID, amount_cents=amount_cents))
            else:
                balance.amount_cents = amount_cents
            await session.commit()

    return _set_balance


@pytest_asyncio.fixture
async def add_transaction(session_factory):
    """
    Insert a ledger row directly, bypassing the spend service.

    Usage:
        await add_transaction("deposit", 1000, "Allowance", 1000,
                              created_at=datetime(2026, 1, 4, 7, tzinfo=timezone.utc))
    """

    async def _add_transaction(
        txn_type: str,
        amount_cents: int,
        description: str,
        balance_after_cents: int,
        created_at: datetime | None = None,
    ) -> Transaction:
        async with session_factory() as session:
            txn = Transaction(
                type=txn_type,
                amount_cents=amount_cents,
                description=description,
                balance_after_cents=balance_after_cents,
                created_at=created_at or datetime.now(timezone.utc),
            )
            session.add(txn)
            await session.commit()
            return txn

    return _add_transaction


@pytest_asyncio.fixture
async def read_balance(session_factory):
    """Read the stored balance in cents through a fresh session."""

    async def _read_balance() -> int:
        async with session_factory() as session:
            balance = await session.get(Balance, Balance.SINGLETON_ID)
            return balance.amount_cents

    return _read_balance


@pytest_asyncio.fixture
async def read_ledger(session_factory):
    """All ledger rows in insertion order, through a fresh session."""

    async def _read_ledger() -> list[Transaction]:
        async with session_factory() as session:
            result = await session.execute(select(Transaction).order_by(Transaction.id))
            return list(result.scalars().all())

    return _read_ledger
