from decimal import Decimal

import pytest

from dadabucks.exceptions import ErrorCode, InvalidAmountError, VaultInsufficientError
from dadabucks.money import format_bucks, require_positive, to_units
from dadabucks.vault import Vault


def test_to_units_accepts_whole_numbers_only() -> None:
    assert to_units(5) == 5
    assert to_units("12") == 12
    assert to_units(Decimal("3.00")) == 3

    for bad in ("2.5", "abc", True, Decimal("NaN")):
        with pytest.raises(InvalidAmountError):
            to_units(bad)


def test_require_positive_and_formatting() -> None:
    assert require_positive(0, allow_zero=True) == 0
    with pytest.raises(InvalidAmountError):
        require_positive(0)
    assert format_bucks(1200) == "1,200 DB"


def test_vault_credit_is_clamped_and_debit_is_checked() -> None:
    vault = Vault(balance=990, max_balance=1000)

    assert vault.credit(25) == 10
    assert vault.balance == 1000

    vault.debit(1000)
    with pytest.raises(VaultInsufficientError):
        vault.debit(1)
    assert vault.balance == 0


def test_bank_vault_adjustments(bank) -> None:
    removed = bank.remove_from_vault(300)
    assert removed.success
    assert bank.vault.balance == 700

    added = bank.add_to_vault(500)
    assert added.get("amount") == 300
    assert bank.vault.balance == 1000
    assert bank.logger.events("vault_overflow")[-1]["discarded"] == 200

    too_much = bank.remove_from_vault(5000)
    assert not too_much
    assert too_much.error is ErrorCode.VAULT_INSUFFICIENT
    assert bank.vault.balance == 1000

    invalid = bank.add_to_vault(0)
    assert invalid.error is ErrorCode.INVALID_AMOUNT
