"""
Spend service — the validated withdrawal workflow.

Sequence:
  1. Validate the amount (before touching the database)
  2. Round it half-up to cents
  3. Read the current balance
  4. Reject if the amount exceeds the balance
  5-6. Compute and persist the new balance
  7. Append a withdrawal row to the ledger
  8. Report the new balance and the amount spent

Atomic mode (the default):
  Step 6 is a conditional decrement that refuses to go below zero, and
  steps 6 and 7 commit together. If the ledger insert fails, the balance
  change is rolled back and the caller gets a storage error. If another
  request drained the balance between steps 3 and 6, the decrement
  matches no row and the spend is rejected as insufficient funds.

Compatibility mode (ATOMIC_SPEND=False):
  The original lenient sequence. The new balance is written with a blind
  overwrite and committed on its own, then the ledger row is inserted. If
  that insert fails, the spend still reports success and a
  PartialWriteInconsistency is logged: the balance and the ledger
  disagree until someone reconciles them by hand.

Neither mode is idempotent. Submitting the same spend twice spends twice.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from allowance_bank.config import settings
from allowance_bank.exceptions import (
    AllowanceBankError,
    InsufficientFundsError,
    InvalidAmountError,
    PartialWriteInconsistency,
    StoreUnavailableError,
)
from allowance_bank.models.transaction import TransactionType
from allowance_bank.money import to_cents
from allowance_bank.services import balance_store, ledger_store


logger = logging.getLogger("allowance_bank.spend")


@dataclass(frozen=True)
class SpendResult:
    new_balance_cents: int
    amount_spent_cents: int
    # False only when compatibility mode lost the ledger row
    ledger_recorded: bool = True


def validate_amount(amount) -> int:
    """
    Check a requested spend amount and return it in integer cents.

    Raises:
        InvalidAmountError: If the amount is missing, not a real number
            (booleans and strings included), not finite, zero or negative,
            or rounds to zero cents.
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidAmountError()
    if not isinstance(amount, (int, float, Decimal)):
        raise InvalidAmountError()
    if isinstance(amount, float) and not math.isfinite(amount):
        raise InvalidAmountError()
    if isinstance(amount, Decimal) and not amount.is_finite():
        raise InvalidAmountError()
    if amount <= 0:
        raise InvalidAmountError()

    try:
        amount_cents = to_cents(amount)
    except ValueError:
        raise InvalidAmountError() from None
    if amount_cents <= 0:
        raise InvalidAmountError()
    return amount_cents


def normalize_description(description: str | None) -> str:
    """Strip the description, falling back to the default label when blank."""
    if description is None or not description.strip():
        return settings.DEFAULT_SPEND_DESCRIPTION
    return description.strip()


async def _commit(db: AsyncSession, what: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Commit failed while %s", what)
        await db.rollback()
        raise StoreUnavailableError("Failed to update balance")


async def spend(
    db: AsyncSession,
    amount,
    description: str | None = None,
    atomic: bool = True,
) -> SpendResult:
    """
    Spend money from the balance and record a withdrawal.

    Args:
        db: Database session for this request.
        amount: Requested amount in dollars (int, float or Decimal).
        description: Optional memo; blank means "Spent money".
        atomic: Commit the balance change and the ledger row together.

    Returns:
        SpendResult with the new balance and the rounded amount spent.

    Raises:
        InvalidAmountError: Bad amount; raised before any database access.
        InsufficientFundsError: The amount exceeds the current balance.
        BalanceNotFoundError: The balance row is missing.
        StoreUnavailableError: A database call failed (in atomic mode this
            includes the ledger insert, and nothing is persisted).
    """
    amount_cents = validate_amount(amount)
    description = normalize_description(description)

    balance = await balance_store.get_balance(db)
    current_cents = balance.amount_cents

    if amount_cents > current_cents:
        logger.info(
            "Spend of %s cents rejected: balance is %s cents",
            amount_cents, current_cents,
        )
        raise InsufficientFundsError(
            requested_cents=amount_cents,
            available_cents=current_cents,
        )

    if atomic:
        result = await _spend_atomic(db, amount_cents, description)
    else:
        result = await _spend_lenient(db, amount_cents, current_cents, description)

    logger.info(
        "Spent %s cents; balance is now %s cents",
        amount_cents, result.new_balance_cents,
    )
    return result


async def _spend_atomic(
    db: AsyncSession,
    amount_cents: int,
    description: str,
) -> SpendResult:
    try:
        new_cents = await balance_store.decrement_balance(db, amount_cents)
        if new_cents is None:
            # Another spend got there first; report what is left now.
            await db.rollback()
            balance = await balance_store.get_balance(db)
            raise InsufficientFundsError(
                requested_cents=amount_cents,
                available_cents=balance.amount_cents,
            )

        await ledger_store.append_transaction(
            db,
            txn_type=TransactionType.WITHDRAWAL,
            amount_cents=amount_cents,
            description=description,
            balance_after_cents=new_cents,
        )
    except AllowanceBankError:
        await db.rollback()
        raise

    await _commit(db, "recording a spend")
    return SpendResult(new_balance_cents=new_cents, amount_spent_cents=amount_cents)


async def _spend_lenient(
    db: AsyncSession,
    amount_cents: int,
    current_cents: int,
    description: str,
) -> SpendResult:
    new_cents = current_cents - amount_cents
    await balance_store.set_balance(db, new_cents)
    await _commit(db, "updating the balance")

    try:
        await ledger_store.append_transaction(
            db,
            txn_type=TransactionType.WITHDRAWAL,
            amount_cents=amount_cents,
            description=description,
            balance_after_cents=new_cents,
        )
        await db.commit()
    except (StoreUnavailableError, SQLAlchemyError):
        await db.rollback()
        logger.error(
            "PartialWriteInconsistency: %s",
            PartialWriteInconsistency(new_cents, amount_cents),
            exc_info=True,
        )
        return SpendResult(
            new_balance_cents=new_cents,
            amount_spent_cents=amount_cents,
            ledger_recorded=False,
        )

    return SpendResult(new_balance_cents=new_cents, amount_spent_cents=amount_cents)
