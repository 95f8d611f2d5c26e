from conftest import give_balance

from dadabucks.service import DadaBank


def test_total_holdings_are_conserved(bank: DadaBank, child_id) -> None:
    sibling = bank.add_child("Sam").child_id
    bank.remove_from_vault(400)
    give_balance(bank, child_id, 60)
    give_balance(bank, sibling, 40)
    total = bank.total_holdings()

    steps = [
        lambda: bank.complete_task(child_id, "task-2"),
        lambda: bank.complete_task(child_id, "task-2"),
        lambda: bank.complete_task(sibling, "task-5"),
        lambda: bank.undo_task_completion(child_id, "task-2"),
        lambda: bank.add_strike(sibling, "a"),
        lambda: bank.add_strike(sibling, "b"),
        lambda: bank.add_strike(sibling, "c"),
        lambda: bank.undo_task_completion(sibling, "task-5"),
        lambda: bank.create_spend_request_from_catalog(child_id, {"spend-1": 2}),
        lambda: bank.approve_request(bank.pending_requests(child_id)[0].id),
        lambda: bank.create_spend_request_from_catalog(sibling, {"spend-3": 1}),
        lambda: bank.deny_request(bank.pending_requests(sibling)[0].id),
        lambda: bank.deposit_to_savings(child_id, 10),
        lambda: bank.withdraw_from_savings(child_id, 4),
        lambda: bank.complete_task(sibling, "task-0"),
    ]
    for step in steps:
        step()
        assert bank.total_holdings() == total

    assert bank.get_child(child_id).balance == 14
    assert bank.get_child(sibling).pending_earnings == 0
