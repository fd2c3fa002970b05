"""
Monetary helpers.

Prices are Decimal throughout; never float. Amounts are quantized to
centavos with banker's rounding so subtotal - discount == total exactly.
"""

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize(amount: Union[Decimal, int, str]) -> Decimal:
    """Round an amount to 2 decimal places (ROUND_HALF_EVEN)"""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def percentage_of(amount: Decimal, percent: Decimal) -> Decimal:
    """Return percent% of amount, quantized"""
    return quantize(amount * percent / Decimal("100"))
