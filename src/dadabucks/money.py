"""Utilities for working with Dada Bucks amounts."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from .exceptions import InvalidAmountError

AmountLike = Union[int, Decimal, str]


def to_units(value: AmountLike) -> int:
    """Convert ``value`` to a whole number of Dada Bucks.

    Bucks are indivisible, so fractional input is rejected rather than rounded.
    """

    if isinstance(value, bool):
        raise InvalidAmountError(f"Unsupported amount: {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"Unsupported amount: {value!r}") from exc
    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidAmountError(f"Amount must be a whole number of bucks: {value!r}")
    return int(number)


def require_positive(amount: int, *, allow_zero: bool = False) -> int:
    """Ensure ``amount`` is positive (or non-negative when ``allow_zero`` is true)."""

    if allow_zero:
        if amount < 0:
            raise InvalidAmountError("Amount must be zero or greater.")
    elif amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero.")
    return amount


def format_bucks(amount: int) -> str:
    """Return ``amount`` in the short display form (e.g. ``12 DB``)."""

    return f"{amount:,} DB"
