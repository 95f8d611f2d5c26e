from datetime import datetime
from itertools import count

import pytest

from dadabucks.clock import ManualClock
from dadabucks.service import DadaBank

INSTALL_MOMENT = datetime(2024, 3, 4, 9, 0)
FIRST_CUTOVER = datetime(2024, 3, 5, 22, 0)


class SequentialIds:
    def __init__(self) -> None:
        self._counter = count(1)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter):04d}"


def give_balance(bank: DadaBank, child_id: str, amount: int) -> None:
    """Move ``amount`` from the vault into a child's spendable balance."""

    bank.vault.debit(amount)
    bank.get_child(child_id).balance += amount


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(INSTALL_MOMENT)


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def bank(clock: ManualClock, ids: SequentialIds) -> DadaBank:
    return DadaBank(clock=clock, id_factory=ids)


@pytest.fixture
def child_id(bank: DadaBank) -> str:
    return bank.children[0].id
