"""
Balance router — read the current balance.

Endpoints:
  GET     /get-balance  — Current balance and when it last changed
  OPTIONS /get-balance  — Empty 200 (cross-origin pre-flight)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from allowance_bank.cors import preflight
from allowance_bank.database import get_db
from allowance_bank.money import cents_to_amount
from allowance_bank.schemas.balance import BalanceResponse
from allowance_bank.services import balance_store

router = APIRouter()

router.add_api_route("/get-balance", preflight, methods=["OPTIONS"], include_in_schema=False)


@router.get(
    "/get-balance",
    response_model=BalanceResponse,
    summary="Get the current balance",
)
async def get_balance(db: AsyncSession = Depends(get_db)):
    """
    Return the current balance in dollars and its last-update timestamp.

    The balance changes when money is spent and when the weekly allowance
    is deposited by the external scheduled trigger.
    """
    balance = await balance_store.get_balance(db)
    return BalanceResponse(
        balance=cents_to_amount(balance.amount_cents),
        updated_at=balance.updated_at,
    )
