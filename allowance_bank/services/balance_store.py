"""
Balance store — read/write access to the singleton balance row.

Every function takes the request's AsyncSession; nothing is cached between
requests. SQLAlchemy errors are logged and re-raised as
StoreUnavailableError with a generic message, so database details never
reach the client.

Two ways to write:
  - set_balance(): blind overwrite. No optimistic-lock token, so two
    concurrent writers can lose an update. Used by the non-atomic
    (compatibility) spend path.
  - decrement_balance(): one conditional UPDATE that subtracts only while
    the result stays non-negative, and reports the new value. Two
    concurrent spends cannot both succeed against the same starting
    balance.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allowance_bank.exceptions import BalanceNotFoundError, StoreUnavailableError
from allowance_bank.models.balance import Balance


logger = logging.getLogger("allowance_bank.balance_store")


async def get_balance(db: AsyncSession) -> Balance:
    """
    Return the singleton balance row.

    Raises:
        BalanceNotFoundError: If the row was never provisioned.
        StoreUnavailableError: If the database query fails.
    """
    try:
        result = await db.execute(
            select(Balance).where(Balance.id == Balance.SINGLETON_ID)
        )
        balance = result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception("Failed to read balance")
        raise StoreUnavailableError("Failed to get balance")

    if balance is None:
        logger.error("Balance row %s is missing", Balance.SINGLETON_ID)
        raise BalanceNotFoundError()

    return balance


async def set_balance(db: AsyncSession, amount_cents: int) -> Balance:
    """
    Overwrite the balance and refresh updated_at.

    The change is flushed, not committed; the caller owns the transaction.
    """
    balance = await get_balance(db)
    balance.amount_cents = amount_cents
    balance.updated_at = datetime.now(timezone.utc)
    try:
        await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to update balance to %s cents", amount_cents)
        raise StoreUnavailableError("Failed to update balance")
    return balance


async def decrement_balance(db: AsyncSession, amount_cents: int) -> int | None:
    """
    Subtract amount_cents from the balance if, and only if, it stays >= 0.

    Returns:
        The new balance in cents, or None when the floor check rejected
        the update (the balance is left untouched).
    """
    try:
        result = await db.execute(
            update(Balance)
            .where(Balance.id == Balance.SINGLETON_ID)
            .where(Balance.amount_cents >= amount_cents)
            .values(
                amount_cents=Balance.amount_cents - amount_cents,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(Balance.amount_cents)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception("Failed to decrement balance by %s cents", amount_cents)
        raise StoreUnavailableError("Failed to update balance")


async def ensure_balance(db: AsyncSession, initial_cents: int = 0) -> Balance:
    """
    Provision the balance row if it does not exist yet.

    An existing row is returned untouched, so this is safe to run on every
    startup.
    """
    try:
        balance = await db.get(Balance, Balance.SINGLETON_ID)
        if balance is None:
            balance = Balance(id=Balance.SINGLETON_ID, amount_cents=initial_cents)
            db.add(balance)
            await db.flush()
            logger.info("Provisioned balance row with %s cents", initial_cents)
    except SQLAlchemyError:
        logger.exception("Failed to provision balance row")
        raise StoreUnavailableError("Failed to provision balance")
    return balance
