"""Savings interest for Dada Bucks."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_FLOOR, Decimal

from .money import require_positive

HUNDREDTHS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class InterestResult:
    """Whole bucks to pay today plus the fractional part in hundredths."""

    whole_units: int
    carry: int

    def __iter__(self):
        yield self.whole_units
        yield self.carry


class InterestCalculator:
    """Daily simple interest paid in whole bucks.

    At the default 1% rate a child earns one buck per hundred saved. The
    fractional part of each day's interest is returned as ``carry``. When
    ``carry_forward`` is off the carry is informational only; when it is on the
    previous day's carry is added to the next day's raw interest.
    """

    def __init__(self, rate: Decimal | str = Decimal("0.01"), *, carry_forward: bool = False) -> None:
        value = Decimal(rate)
        if value < Decimal("0"):
            raise ValueError("rate cannot be negative")
        self.rate = value
        self.carry_forward = carry_forward

    def calculate(self, savings_balance: int, carry: int = 0) -> InterestResult:
        require_positive(savings_balance, allow_zero=True)
        raw = Decimal(savings_balance) * self.rate
        if self.carry_forward:
            raw += Decimal(carry) * HUNDREDTHS
        whole = raw.to_integral_value(rounding=ROUND_FLOOR)
        fraction = (raw - whole).quantize(HUNDREDTHS, rounding=ROUND_DOWN)
        return InterestResult(whole_units=int(whole), carry=int(fraction / HUNDREDTHS))

    def explain(self) -> str:
        per_hundred = (self.rate * 100).normalize()
        return f"Every day you earn {per_hundred} Dada Buck for each 100 in savings."


__all__ = ["InterestCalculator", "InterestResult"]
