"""The single mutable state object owned by a :class:`~dadabucks.service.DadaBank`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List
from uuid import uuid4

from .config import BankConfig
from .ledger import TransactionLog
from .models import ChildProfile
from .notifications import ApprovalNotifications
from .spending import SpendCatalog, SpendRequestBook
from .strikes import StrikeLedger
from .tasks import TaskRegistry
from .vault import Vault

IdFactory = Callable[[str], str]


def random_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:13]}"


@dataclass(slots=True)
class BankState:
    children: List[ChildProfile]
    vault: Vault
    tasks: TaskRegistry
    spend_items: SpendCatalog
    transactions: TransactionLog
    requests: SpendRequestBook
    notifications: ApprovalNotifications
    strikes: StrikeLedger
    last_reset_date: str
    current_child_id: str = ""

    @classmethod
    def fresh(cls, config: BankConfig, *, today: str, id_factory: IdFactory = random_id) -> "BankState":
        """Build the defaults: one child, a full vault and the starter catalogs."""

        child = ChildProfile(
            id=id_factory("child"),
            name=config.default_child_name,
            avatar=config.default_child_avatar,
            last_interest_date=today,
        )
        return cls(
            children=[child],
            vault=Vault(
                balance=config.initial_vault_balance,
                max_balance=config.vault_max,
                daily_allowance=config.daily_allowance,
            ),
            tasks=TaskRegistry.with_defaults(),
            spend_items=SpendCatalog.with_defaults(),
            transactions=TransactionLog(id_factory=id_factory),
            requests=SpendRequestBook(id_factory=id_factory),
            notifications=ApprovalNotifications(),
            strikes=StrikeLedger(max_strikes=config.max_strikes, id_factory=id_factory),
            last_reset_date=today,
        )

    def total_holdings(self) -> int:
        """Vault plus every child's balance, savings and pending earnings."""

        return self.vault.balance + sum(child.holdings for child in self.children)


__all__ = ["BankState", "IdFactory", "random_id"]
