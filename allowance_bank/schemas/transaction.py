"""
Pydantic schemas for the transaction history endpoint.

The ledger stores integer cents and a created_at column; the history
screen expects dollar amounts, a "timestamp" field and camelCase names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from allowance_bank.models.transaction import Transaction
from allowance_bank.money import cents_to_amount


class TransactionResponse(BaseModel):
    """Public representation of one ledger entry."""
    id: int
    type: str
    amount: float
    description: str
    timestamp: datetime
    balance_after: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_transaction(cls, txn: Transaction) -> "TransactionResponse":
        return cls(
            id=txn.id,
            type=txn.type,
            amount=cents_to_amount(txn.amount_cents),
            description=txn.description,
            timestamp=txn.created_at,
            balance_after=cents_to_amount(txn.balance_after_cents),
        )


class TransactionListResponse(BaseModel):
    """Response body for GET /get-transactions, newest first."""
    transactions: list[TransactionResponse]
