"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows about every
table before create_all() runs, and so other modules can import from
allowance_bank.models directly.
"""

from allowance_bank.models.balance import Balance  # noqa: F401
from allowance_bank.models.transaction import Transaction, TransactionType  # noqa: F401
