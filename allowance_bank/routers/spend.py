"""
Spend router — take money out of the bank.

Endpoints:
  POST    /spend  — Spend an amount, recording a withdrawal
  OPTIONS /spend  — Empty 200 (cross-origin pre-flight)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from allowance_bank.config import settings
from allowance_bank.cors import preflight
from allowance_bank.database import get_db
from allowance_bank.money import cents_to_amount
from allowance_bank.schemas.spend import SpendRequest, SpendResponse
from allowance_bank.services import spend_service

router = APIRouter()

router.add_api_route("/spend", preflight, methods=["OPTIONS"], include_in_schema=False)


@router.post(
    "/spend",
    response_model=SpendResponse,
    summary="Spend money",
)
async def spend(
    request: SpendRequest | None = None,
    db: AsyncSession = Depends(get_db),
):
    """
    Spend money from the balance.

    - **amount**: Dollars, rounded half-up to cents. Must be positive and
      no more than the current balance.
    - **description**: Optional; defaults to "Spent money".

    Errors come back as {"error": "..."} with status 400 (bad amount, or
    not enough money, which also includes `currentBalance`) or 500.
    """
    request = request or SpendRequest()
    result = await spend_service.spend(
        db=db,
        amount=request.amount,
        description=request.description,
        atomic=settings.ATOMIC_SPEND,
    )
    return SpendResponse(
        new_balance=cents_to_amount(result.new_balance_cents),
        amount_spent=cents_to_amount(result.amount_spent_cents),
    )
