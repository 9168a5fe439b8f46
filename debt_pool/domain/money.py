"""Monetary rounding primitive shared by every balance computation"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from debt_pool.domain.exceptions import InvalidAmountError

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Number) -> Decimal:
    """
    Coerce caller input into a Decimal without rounding.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion.

    Raises:
        InvalidAmountError: value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Not a monetary amount: {value!r}")
    if isinstance(value, Decimal):
        dec = value
    else:
        try:
            dec = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as e:
            raise InvalidAmountError(f"Not a monetary amount: {value!r}") from e

    if not dec.is_finite():
        raise InvalidAmountError(f"Not a monetary amount: {value!r}")
    return dec


def round2(value: Number) -> Decimal:
    """
    Round to cents, half away from zero.

    Example:
        round2("0.125") -> Decimal("0.13")
        round2(-0.125)  -> Decimal("-0.13")

    Raises:
        InvalidAmountError: value is not a finite number or too large to hold cents
    """
    try:
        return to_money(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Amount out of range: {value!r}") from e
