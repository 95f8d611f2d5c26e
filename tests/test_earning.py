from dadabucks.exceptions import ErrorCode
from dadabucks.models import TaskUpdate


def test_complete_task_moves_payout_from_vault_to_pending(bank, child_id) -> None:
    result = bank.complete_task(child_id, "task-2")

    assert result.success
    assert result.earned == 5
    assert result.message == "Great job! 5 Dada Bucks will be added at 10 PM!"
    child = bank.get_child(child_id)
    assert child.pending_earnings == 5
    assert child.balance == 0
    assert bank.get_task("task-2").completions == 1
    assert bank.vault.balance == 995
    assert bank.transactions(child_id) == ()


def test_complete_task_reports_missing_child_and_task(bank, child_id) -> None:
    missing_task = bank.complete_task(child_id, "task-missing")
    assert missing_task.error is ErrorCode.NOT_FOUND
    assert missing_task.message == "Task not found"

    missing_child = bank.complete_task("child-missing", "task-2")
    assert missing_child.error is ErrorCode.NOT_FOUND
    assert missing_child.message == "Child not found"


def test_daily_cap_blocks_further_completions(bank, child_id) -> None:
    assert bank.complete_task(child_id, "task-1")

    capped = bank.complete_task(child_id, "task-1")

    assert capped.error is ErrorCode.DAILY_CAP_REACHED
    assert capped.message == "Daily limit reached (1/1)"
    assert bank.get_child(child_id).pending_earnings == 3


def test_failure_checks_run_in_documented_order(bank, child_id) -> None:
    bank.update_task("task-1", TaskUpdate(is_active=False))
    for reason in ("a", "b", "c"):
        bank.add_strike(child_id, reason)

    assert bank.complete_task(child_id, "task-1").error is ErrorCode.INACTIVE
    assert bank.complete_task(child_id, "task-5").error is ErrorCode.STRIKES_EXHAUSTED

    bank.reset_strikes()
    assert bank.complete_task(child_id, "task-5")
    bank.remove_from_vault(bank.vault.balance)
    assert bank.complete_task(child_id, "task-5").error is ErrorCode.DAILY_CAP_REACHED
    assert bank.complete_task(child_id, "task-2").error is ErrorCode.VAULT_INSUFFICIENT


def test_failed_completion_leaves_state_untouched(bank, child_id) -> None:
    bank.remove_from_vault(998)
    before = bank.snapshot()

    result = bank.complete_task(child_id, "task-2")

    assert result.error is ErrorCode.VAULT_INSUFFICIENT
    assert bank.snapshot() == before


def test_undo_reverses_one_completion(bank, child_id) -> None:
    bank.complete_task(child_id, "task-0")
    bank.complete_task(child_id, "task-0")

    undone = bank.undo_task_completion(child_id, "task-0")

    assert undone.success
    assert bank.get_task("task-0").completions == 1
    assert bank.get_child(child_id).pending_earnings == 2
    assert bank.vault.balance == 998


def test_undo_without_completions_fails(bank, child_id) -> None:
    result = bank.undo_task_completion(child_id, "task-0")

    assert result.error is ErrorCode.NOTHING_TO_UNDO
    assert result.message == "No completions to undo"


def test_undo_after_forfeiture_only_returns_what_is_left(bank, child_id) -> None:
    bank.complete_task(child_id, "task-2")
    for reason in ("a", "b", "c"):
        bank.add_strike(child_id, reason)
    assert bank.vault.balance == 1000

    result = bank.undo_task_completion(child_id, "task-2")

    assert result.success
    assert result.get("removed") == 0
    assert bank.get_task("task-2").completions == 0
    assert bank.vault.balance == 1000
