"""
Balance model — the single current-funds row.

The bank has exactly one balance. Rather than relying on callers to
remember a magic row id, the row's key is pinned by a CHECK constraint
(id = SINGLETON_ID), so the database itself refuses a second row. All
access goes through allowance_bank.services.balance_store.

Balance management:
  `amount_cents` is a cached aggregate of the ledger's running total,
  stored redundantly for fast reads. It is stored as integer cents
  ($10.50 = 1050) so arithmetic is exact, and a CHECK constraint keeps
  it from ever going negative. The spend path also checks before
  debiting; the constraint is the final safety net.
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from allowance_bank.database import Base


class Balance(Base):
    __tablename__ = "balance"

    SINGLETON_ID = 1

    __table_args__ = (
        CheckConstraint(f"id = {SINGLETON_ID}", name="ck_balance_singleton"),
        CheckConstraint("amount_cents >= 0", name="ck_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        default=SINGLETON_ID,
    )

    amount_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Refreshed by every mutation (spend here, deposits from the external trigger)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
