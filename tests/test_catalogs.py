from dadabucks.exceptions import ErrorCode
from dadabucks.models import (
    ChildUpdate,
    SpendCategory,
    SpendItemDraft,
    SpendItemUpdate,
    TaskCategory,
    TaskDraft,
    TaskUpdate,
)


def test_default_catalogs(bank) -> None:
    assert [task.id for task in bank.tasks] == [f"task-{index}" for index in range(11)]
    assert [item.id for item in bank.spend_items] == [f"spend-{index}" for index in range(6)]
    assert bank.get_task("task-5").name == "Pooper scoop"
    assert bank.children[0].name == "Alex"
    assert bank.vault.balance == 1000


def test_task_management(bank, child_id) -> None:
    added = bank.add_task(TaskDraft("Feed the cat", "🐱", 4, 2, TaskCategory.HELPING))
    assert added.success
    task_id = added.task_id
    assert bank.get_task(task_id).category is TaskCategory.HELPING

    bank.complete_task(child_id, task_id)
    bank.complete_task(child_id, task_id)
    assert bank.update_task(task_id, TaskUpdate(daily_max=1, payout=6)).success
    task = bank.get_task(task_id)
    assert (task.payout, task.daily_max, task.completions) == (6, 1, 1)

    toggled = bank.toggle_task_active(task_id)
    assert toggled.get("is_active") is False
    assert toggled.message == "Task turned off"

    assert bank.delete_task(task_id).success
    assert bank.delete_task(task_id).error is ErrorCode.NOT_FOUND


def test_task_validation_happens_before_merge(bank) -> None:
    invalid = bank.update_task("task-0", TaskUpdate(name="Renamed", payout=0))

    assert invalid.error is ErrorCode.INVALID_AMOUNT
    assert bank.get_task("task-0").name == "Clean up after yourself"
    assert bank.add_task(TaskDraft("  ", "x", 1, 1)).error is ErrorCode.INVALID_AMOUNT
    assert bank.add_task(TaskDraft("Nap", "x", 1, 0)).error is ErrorCode.INVALID_AMOUNT


def test_spend_item_management(bank) -> None:
    added = bank.add_spend_item(
        SpendItemDraft("Park trip", "🛝", 30, 1, 1, SpendCategory.ACTIVITIES, "An hour at the park")
    )
    item_id = added.item_id

    assert bank.update_spend_item(item_id, SpendItemUpdate(max_quantity=2, quantity=2)).success
    request_item = bank.request_item(item_id)
    assert (request_item.quantity, request_item.subtotal) == (2, 60)

    bad = bank.update_spend_item(item_id, SpendItemUpdate(quantity=5))
    assert bad.error is ErrorCode.INVALID_AMOUNT
    assert bank.delete_spend_item(item_id).success
    assert bank.delete_spend_item(item_id).message == "Spend item not found"


def test_child_roster(bank, child_id) -> None:
    added = bank.add_child("Sam", "👦")
    sam = added.child_id
    assert added.message == "Sam joined Dada Bucks!"

    assert bank.update_child(sam, ChildUpdate(name="Samuel")).success
    assert bank.get_child(sam).name == "Samuel"
    assert bank.update_child(sam, ChildUpdate(name=" ")).error is ErrorCode.INVALID_AMOUNT
    assert bank.add_child("").error is ErrorCode.INVALID_AMOUNT

    assert bank.select_child(sam).success
    assert bank.current_child_id == sam
    assert bank.delete_child(sam).success
    assert bank.current_child_id == child_id

    last = bank.delete_child(child_id)
    assert last.error is ErrorCode.LAST_CHILD_PROTECTED
    assert last.message == "Can't remove the last child"


def test_deleting_child_discards_their_records(bank, child_id) -> None:
    sam = bank.add_child("Sam").child_id
    bank.complete_task(sam, "task-2")
    bank.add_strike(sam, "late")

    result = bank.delete_child(sam)

    assert result.get("returned") == 5
    assert bank.vault.balance == 1000
    assert bank.strikes(sam) == ()
    assert [child.id for child in bank.children] == [child_id]
