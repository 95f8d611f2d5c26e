"""Configuration for the Dada Bucks engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

VAULT_MAX = 1000
DAILY_SPEND_LIMIT = 40
MAX_STRIKES = 3
RESET_HOUR = 22
SAVINGS_INTEREST_RATE = Decimal("0.01")
STORAGE_KEY = "dada-bucks-storage"
ENV_PREFIX = "DADABUCKS_"


@dataclass(frozen=True, slots=True)
class BankConfig:
    """Tunable household rules. Defaults match the classic 10 PM setup."""

    reset_hour: int = RESET_HOUR
    vault_max: int = VAULT_MAX
    initial_vault_balance: int = VAULT_MAX
    daily_allowance: int = DAILY_SPEND_LIMIT
    max_strikes: int = MAX_STRIKES
    interest_rate: Decimal = SAVINGS_INTEREST_RATE
    carry_interest_forward: bool = False
    parent_challenge: Tuple[int, int] = (7, 5)
    default_child_name: str = "Alex"
    default_child_avatar: str = "👧"
    locale: str = "en"

    def __post_init__(self) -> None:
        if not 0 <= self.reset_hour <= 23:
            raise ValueError("reset_hour must be between 0 and 23")
        if self.vault_max <= 0:
            raise ValueError("vault_max must be positive")
        if not 0 <= self.initial_vault_balance <= self.vault_max:
            raise ValueError("initial_vault_balance must be between 0 and vault_max")
        if self.max_strikes <= 0:
            raise ValueError("max_strikes must be positive")
        if self.interest_rate < 0:
            raise ValueError("interest_rate cannot be negative")

    @property
    def reset_label(self) -> str:
        """Return the cutover as shown to children, e.g. ``10 PM``."""

        hour = self.reset_hour % 12 or 12
        return f"{hour} {'AM' if self.reset_hour < 12 else 'PM'}"


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_challenge(raw: str) -> Tuple[int, int]:
    left, _, right = raw.partition("+")
    try:
        return int(left), int(right)
    except ValueError as exc:
        raise ValueError(f"Parent challenge must look like '7+5', got {raw!r}") from exc


def load_config(environ: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> BankConfig:
    """Build a :class:`BankConfig` from ``DADABUCKS_*`` environment variables."""

    if environ is None:
        if dotenv:
            load_dotenv()
        environ = os.environ

    def read(name: str) -> Optional[str]:
        value = environ.get(ENV_PREFIX + name)
        return value if value not in (None, "") else None

    values: dict = {}
    for name, field_name in (
        ("RESET_HOUR", "reset_hour"),
        ("VAULT_MAX", "vault_max"),
        ("INITIAL_VAULT", "initial_vault_balance"),
        ("DAILY_ALLOWANCE", "daily_allowance"),
        ("MAX_STRIKES", "max_strikes"),
    ):
        raw = read(name)
        if raw is not None:
            values[field_name] = int(raw)
    if "vault_max" in values and "initial_vault_balance" not in values:
        values["initial_vault_balance"] = values["vault_max"]
    rate = read("INTEREST_RATE")
    if rate is not None:
        try:
            values["interest_rate"] = Decimal(rate)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid interest rate {rate!r}") from exc
    carry = read("CARRY_INTEREST")
    if carry is not None:
        values["carry_interest_forward"] = _parse_bool(carry)
    challenge = read("PARENT_CHALLENGE")
    if challenge is not None:
        values["parent_challenge"] = _parse_challenge(challenge)
    for name, field_name in (
        ("CHILD_NAME", "default_child_name"),
        ("CHILD_AVATAR", "default_child_avatar"),
        ("LOCALE", "locale"),
    ):
        raw = read(name)
        if raw is not None:
            values[field_name] = raw
    return BankConfig(**values)


__all__ = [
    "BankConfig",
    "DAILY_SPEND_LIMIT",
    "MAX_STRIKES",
    "RESET_HOUR",
    "SAVINGS_INTEREST_RATE",
    "STORAGE_KEY",
    "VAULT_MAX",
    "load_config",
]
