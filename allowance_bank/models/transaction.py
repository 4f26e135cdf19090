"""
Transaction model — the append-only ledger.

Every movement of money creates one Transaction row:

  - type: "deposit" (the weekly allowance, written by an external
    scheduled trigger) or "withdrawal" (written by the spend operation)
  - amount_cents: always positive; the direction is implied by the type
  - balance_after_cents: the balance immediately after this event, so the
    history screen can show a running total without recomputing it

Rows are never updated or deleted. Storage order is insertion order;
"newest first" is a query-time sort on created_at, with the
autoincrement id breaking ties between rows written in the same instant.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Text, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from allowance_bank.database import Base


class TransactionType(str, enum.Enum):
    """
    Direction of a ledger entry.

    Inherits from str so the value serializes naturally to JSON and is
    stored as a plain string column.
    """
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="ck_transactions_positive_amount"),
        CheckConstraint(
            "type IN ('deposit', 'withdrawal')",
            name="ck_transactions_type",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Free text, no length limit
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    balance_after_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Indexed for the newest-first history listing
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
