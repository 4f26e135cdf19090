"""
Pydantic schemas for the spend endpoint.

The request schema only enforces the JSON shape: amount must be a real
number (strict, so "12" and true are refused) and finite. Whether the
amount is positive and affordable is the spend service's job, so the
same rules apply when the service is called without HTTP.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SpendRequest(BaseModel):
    """Request body for POST /spend."""
    amount: float | None = Field(
        default=None,
        strict=True,
        allow_inf_nan=False,
        description="Amount in dollars; rounded half-up to cents",
    )
    description: str | None = Field(
        default=None,
        description="What the money was spent on",
    )


class SpendResponse(BaseModel):
    """Response body for a successful spend."""
    success: bool = True
    new_balance: float
    amount_spent: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
