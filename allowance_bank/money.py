"""
Monetary conversions between JSON numbers and integer cents.

Amounts are stored and compared as integer cents, so balance arithmetic is
exact. The API still speaks in dollars (JSON numbers with two decimals), so
every value crosses this module on the way in and on the way out.

Rounding is half-up at the cent boundary, applied to the decimal form of
the number as the client wrote it: 12.345 becomes 12.35, even though the
nearest binary float to 12.345 sits just below it.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

CENT = Decimal("0.01")


def round_money(value) -> Decimal:
    """Round a number to two decimal places, half-up."""
    try:
        amount = Decimal(str(value))
        with localcontext() as ctx:
            # Keep every integer digit plus the two cents, however large.
            if amount.is_finite():
                ctx.prec = max(ctx.prec, amount.adjusted() + 3)
            return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Not a monetary value: {value!r}") from None


def to_cents(value) -> int:
    """Convert a dollar amount to integer cents, rounding half-up."""
    amount = round_money(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + 2)
        return int(amount * 100)


def cents_to_amount(cents: int) -> float:
    """Convert integer cents to the float the JSON API returns (1050 -> 10.5)."""
    return float(Decimal(cents) / 100)
