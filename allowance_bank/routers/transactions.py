"""
Transactions router — the history screen's data.

Endpoints:
  GET     /get-transactions  — Every ledger entry, newest first
  OPTIONS /get-transactions  — Empty 200 (cross-origin pre-flight)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from allowance_bank.cors import preflight
from allowance_bank.database import get_db
from allowance_bank.schemas.transaction import TransactionListResponse, TransactionResponse
from allowance_bank.services import ledger_store

router = APIRouter()

router.add_api_route("/get-transactions", preflight, methods=["OPTIONS"], include_in_schema=False)


@router.get(
    "/get-transactions",
    response_model=TransactionListResponse,
    summary="List all transactions, newest first",
)
async def list_transactions(db: AsyncSession = Depends(get_db)):
    """List deposits and withdrawals. No pagination; the ledger is small."""
    transactions = await ledger_store.list_transactions(db)
    return TransactionListResponse(
        transactions=[TransactionResponse.from_transaction(txn) for txn in transactions],
    )
