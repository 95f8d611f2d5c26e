"""The bounded reserve that backs every payout."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import VaultInsufficientError
from .money import format_bucks, require_positive


@dataclass(slots=True)
class Vault:
    """Pool of bucks available to pay out, kept within ``[0, max_balance]``."""

    balance: int
    max_balance: int = 1000
    daily_allowance: int = 40

    def __post_init__(self) -> None:
        if self.max_balance <= 0:
            raise ValueError("max_balance must be positive.")
        if not 0 <= self.balance <= self.max_balance:
            raise ValueError("Vault balance must be between 0 and max_balance.")

    @property
    def headroom(self) -> int:
        return self.max_balance - self.balance

    def can_cover(self, amount: int) -> bool:
        return self.balance >= amount

    def ensure_covers(self, amount: int) -> None:
        if not self.can_cover(amount):
            raise VaultInsufficientError(
                f"The vault only holds {format_bucks(self.balance)}.", balance=self.balance, amount=amount
            )

    def debit(self, amount: int) -> int:
        require_positive(amount)
        self.ensure_covers(amount)
        self.balance -= amount
        return amount

    def credit(self, amount: int) -> int:
        """Return bucks to the vault, clamped at ``max_balance``.

        Returns the amount actually absorbed.
        """

        require_positive(amount, allow_zero=True)
        absorbed = min(amount, self.headroom)
        self.balance += absorbed
        return absorbed


__all__ = ["Vault"]
