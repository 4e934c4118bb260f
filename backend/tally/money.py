"""Helpers for working with currency amounts."""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Sequence

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Return ``value`` as a ``Decimal`` rounded half-up to whole cents.

    Floats are converted through ``str`` so ``0.1`` becomes ``0.10`` rather
    than its binary expansion.

    Raises:
        ValueError: If ``value`` is not a finite number.
    """

    if isinstance(value, bool):
        raise ValueError("amount must be a number (not a boolean)")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"amount {value!r} is not a number")
    if not amount.is_finite():
        raise ValueError(f"amount {value!r} is not finite")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def split_evenly(amount: Decimal, parts: int) -> list[Decimal]:
    """Split ``amount`` into ``parts`` cent-exact shares.

    Every share gets the floor of the even split; leftover cents go one each
    to the earliest shares, so the shares always sum to ``amount``.
    """

    if parts <= 0:
        raise ValueError("parts must be positive")
    amount = to_money(amount)
    if amount < 0:
        raise ValueError("cannot split a negative amount")
    base = (amount / parts).quantize(CENT, rounding=ROUND_DOWN)
    leftover_cents = int((amount - base * parts) / CENT)
    return [base + CENT if i < leftover_cents else base for i in range(parts)]


def total(amounts: Sequence[Decimal]) -> Decimal:
    return to_money(sum(amounts, ZERO))


def format_money(amount: Decimal) -> str:
    """Format ``amount`` the way payout messages display it (``$1,234.50``)."""

    amount = to_money(amount)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
