"""
Pydantic schemas for the balance endpoint.

Amounts are integer cents internally but JSON numbers (dollars) on the
wire, and field names are camelCase to match the front end.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BalanceResponse(BaseModel):
    """Response body for GET /get-balance."""
    balance: float
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
