"""
Ledger store — append and read access to the transactions table.

The ledger is append-only: this module inserts rows and lists them, and
offers nothing that updates or deletes one.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allowance_bank.exceptions import StoreUnavailableError
from allowance_bank.models.transaction import Transaction, TransactionType


logger = logging.getLogger("allowance_bank.ledger_store")


async def list_transactions(db: AsyncSession) -> list[Transaction]:
    """
    Return every ledger entry, newest first.

    Full scan with no pagination or filtering. Rows written in the same
    instant fall back to insertion order (higher id first).
    """
    try:
        result = await db.execute(
            select(Transaction)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        )
        return list(result.scalars().all())
    except SQLAlchemyError:
        logger.exception("Failed to list transactions")
        raise StoreUnavailableError("Failed to get transactions")


async def append_transaction(
    db: AsyncSession,
    txn_type: TransactionType,
    amount_cents: int,
    description: str,
    balance_after_cents: int,
) -> Transaction:
    """
    Insert one ledger row.

    The row is flushed (so its id is assigned) but not committed; the caller
    decides whether it shares a transaction with the balance update.
    """
    txn = Transaction(
        type=txn_type.value,
        amount_cents=amount_cents,
        description=description,
        balance_after_cents=balance_after_cents,
    )
    try:
        db.add(txn)
        await db.flush()
    except SQLAlchemyError:
        logger.exception("Failed to append %s of %s cents", txn_type.value, amount_cents)
        raise StoreUnavailableError("Failed to record transaction")
    return txn
