"""
Tests for the balance endpoint and the balance store.

These tests verify:
  - GET /get-balance returns the balance in dollars with its timestamp
  - A missing balance row is a 500 with a generic message
  - Database failures are mapped to a generic 500, never leaked
  - Provisioning creates the singleton row once and never overwrites it
  - The database refuses a second balance row and a negative balance
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from allowance_bank.config import settings
from allowance_bank.exceptions import StoreUnavailableError
from allowance_bank.models.balance import Balance
from allowance_bank.services import balance_store

API = settings.API_PREFIX


class TestGetBalance:
    """Tests for GET /get-balance."""

    async def test_returns_balance_and_timestamp(self, client, set_balance):
        await set_balance(4250)

        response = await client.get(f"{API}/get-balance")
        assert response.status_code == 200
        data = response.json()
        assert data["balance"] == 42.5
        assert isinstance(data["updatedAt"], str)
        assert set(data) == {"balance", "updatedAt"}

    async def test_zero_balance(self, client, set_balance):
        await set_balance(0)

        response = await client.get(f"{API}/get-balance")
        assert response.json()["balance"] == 0

    async def test_missing_row_is_server_error(self, client):
        response = await client.get(f"{API}/get-balance")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get balance"}

    async def test_database_failure_is_not_leaked(self, client, set_balance):
        await set_balance(1000)

        with patch(
            "sqlalchemy.ext.asyncio.AsyncSession.execute",
            side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
        ):
            response = await client.get(f"{API}/get-balance")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get balance"}
        assert "disk" not in response.text


class TestBalanceStore:
    """Tests for the store functions, called directly."""

    async def test_ensure_balance_provisions_missing_row(self, db_session, read_balance):
        balance = await balance_store.ensure_balance(db_session, 2500)
        await db_session.commit()

        assert balance.id == Balance.SINGLETON_ID
        assert await read_balance() == 2500

    async def test_ensure_balance_keeps_existing_row(self, db_session, set_balance, read_balance):
        await set_balance(700)

        await balance_store.ensure_balance(db_session, 0)
        await db_session.commit()

        assert await read_balance() == 700

    async def test_set_balance_overwrites_and_refreshes_timestamp(
        self, db_session, set_balance, read_balance
    ):
        await set_balance(1000)
        before = (await balance_store.get_balance(db_session)).updated_at

        balance = await balance_store.set_balance(db_session, 250)
        await db_session.commit()

        assert balance.amount_cents == 250
        assert balance.updated_at.replace(tzinfo=None) >= before.replace(tzinfo=None)
        assert await read_balance() == 250

    async def test_second_balance_row_is_refused(self, db_session, set_balance):
        await set_balance(100)

        db_session.add(Balance(id=2, amount_cents=100))
        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_negative_balance_is_refused(self, db_session, set_balance):
        await set_balance(100)

        with pytest.raises(StoreUnavailableError):
            await balance_store.set_balance(db_session, -1)
