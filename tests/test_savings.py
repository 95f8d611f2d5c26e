from conftest import FIRST_CUTOVER, give_balance

from dadabucks.exceptions import ErrorCode
from dadabucks.models import TransactionType


def test_savings_round_trip_leaves_vault_alone(bank, clock, child_id) -> None:
    give_balance(bank, child_id, 100)
    vault_before = bank.vault.balance

    deposit = bank.deposit_to_savings(child_id, 100)
    child = bank.get_child(child_id)
    assert deposit.message == "Moved 100 DB to savings!"
    assert (child.balance, child.savings) == (0, 100)

    clock.set(FIRST_CUTOVER)
    outcome = bank.check_and_perform_daily_reset()
    assert outcome.interest_earned == 1
    assert child.savings == 101
    assert child.savings_interest_accrued == 0

    withdraw = bank.withdraw_from_savings(child_id, 50)
    assert withdraw.success
    assert (child.balance, child.savings) == (50, 51)
    assert bank.vault.balance == vault_before


def test_savings_transactions_use_balance_perspective(bank, child_id) -> None:
    give_balance(bank, child_id, 30)

    bank.deposit_to_savings(child_id, 20)
    bank.withdraw_from_savings(child_id, "5")

    withdrawal, deposit = bank.transactions(child_id)
    assert deposit.type is TransactionType.SAVINGS_DEPOSIT
    assert deposit.amount == -20
    assert withdrawal.type is TransactionType.SAVINGS_WITHDRAWAL
    assert withdrawal.amount == 5


def test_savings_failures(bank, child_id) -> None:
    give_balance(bank, child_id, 10)

    assert bank.deposit_to_savings(child_id, 0).error is ErrorCode.INVALID_AMOUNT
    assert bank.deposit_to_savings(child_id, -3).error is ErrorCode.INVALID_AMOUNT
    assert bank.deposit_to_savings(child_id, "1.5").error is ErrorCode.INVALID_AMOUNT

    too_much = bank.deposit_to_savings(child_id, 11)
    assert too_much.error is ErrorCode.INSUFFICIENT_BALANCE
    assert too_much.message == "Not enough balance. You have 10 DB"

    withdraw = bank.withdraw_from_savings(child_id, 1)
    assert withdraw.error is ErrorCode.INSUFFICIENT_SAVINGS
    assert withdraw.message == "Not enough savings. You have 0 DB"
    assert bank.transactions(child_id) == ()
