import csv
from io import StringIO

from conftest import FIRST_CUTOVER, give_balance

from dadabucks.models import TransactionType


def test_today_stats_and_transactions(bank, clock, child_id) -> None:
    give_balance(bank, child_id, 40)
    bank.deposit_to_savings(child_id, 20)
    bank.complete_task(child_id, "task-2")
    clock.set(FIRST_CUTOVER)
    bank.check_and_perform_daily_reset()
    request = bank.create_spend_request_from_catalog(child_id, {"spend-3": 1})
    bank.approve_request(request.request_id)
    bank.add_strike(child_id, "Late for dinner")

    stats = bank.today_stats(child_id)
    today = bank.today_transactions(child_id)

    assert (stats.earned, stats.spent, stats.strikes) == (5, 5, 1)
    assert [entry.type for entry in today] == [TransactionType.SPEND, TransactionType.EARN]
    assert len(bank.transactions(child_id)) == 3
    assert bank.transactions("child-missing") == ()


def test_csv_export(bank, child_id) -> None:
    give_balance(bank, child_id, 30)
    bank.deposit_to_savings(child_id, 10)
    bank.withdraw_from_savings(child_id, 3)

    rows = list(csv.reader(StringIO(bank.export_transactions_csv(child_id))))

    assert rows[0] == ["timestamp", "child_id", "type", "description", "amount"]
    assert [row[2] for row in rows[1:]] == ["savings_withdrawal", "savings_deposit"]
    assert rows[1][4] == "3"
    assert rows[2][4] == "-10"
    assert rows[1][0] == "2024-03-04T09:00:00"
