"""
Money helpers. Every amount in the ledger is a Decimal with cent precision.
"""

from decimal import Decimal, InvalidOperation as DecimalInvalidOperation
from typing import Union

from greenpages.app.core.exceptions import InvalidOperationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")

AmountLike = Union[Decimal, int, str, float]


def to_money(value) -> Decimal:
    """Normalise a stored or aggregated amount to cent precision (None counts as zero)."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT)


def require_positive_amount(value: AmountLike) -> Decimal:
    """
    Parse a caller-supplied amount.

    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.

    Raises:
        InvalidOperationError: amount is not a number, not positive, above
            MAX_AMOUNT, or has more than two fractional digits
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (DecimalInvalidOperation, ValueError):
        raise InvalidOperationError(f"Amount {value!r} is not a valid number")

    if not amount.is_finite():
        raise InvalidOperationError(f"Amount {value!r} is not a valid number")
    if amount <= 0:
        raise InvalidOperationError(
            f"Amount must be positive, got {amount}",
            details={"amount": str(amount)}
        )
    if amount > MAX_AMOUNT:
        raise InvalidOperationError(
            f"Amount {amount} exceeds the maximum of {MAX_AMOUNT}",
            details={"amount": str(amount), "max_amount": str(MAX_AMOUNT)}
        )

    try:
        quantized = amount.quantize(CENT)
    except DecimalInvalidOperation:
        raise InvalidOperationError(f"Amount {value!r} is not a valid number")
    if amount != quantized:
        raise InvalidOperationError(
            f"Amount {amount} has more than two decimal places",
            details={"amount": str(amount)}
        )
    return quantized
