"""Offer price arithmetic."""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def calculate_final_price(base_price: Decimal, discount_rate: Decimal) -> Decimal:
    """Apply a percentage discount to a base price.

    The discount is clamped to [0, 100] and the result is never negative.
    """
    base = max(Decimal(base_price), Decimal("0"))
    rate = min(max(Decimal(discount_rate), Decimal("0")), _HUNDRED)
    final = base * (_HUNDRED - rate) / _HUNDRED
    return max(final, Decimal("0")).quantize(_CENT, rounding=ROUND_HALF_UP)
