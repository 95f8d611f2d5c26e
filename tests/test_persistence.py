import json

import pytest
from conftest import FIRST_CUTOVER, give_balance

from dadabucks.config import STORAGE_KEY
from dadabucks.exceptions import CorruptStateError
from dadabucks.service import DadaBank
from dadabucks.snapshot import from_json
from dadabucks.storage import JsonFileSnapshotStore, MemorySnapshotStore


def _busy_bank(bank: DadaBank, clock, child_id: str) -> DadaBank:
    give_balance(bank, child_id, 50)
    bank.complete_task(child_id, "task-2")
    bank.add_strike(child_id, "Shouting")
    request = bank.create_spend_request_from_catalog(child_id, {"spend-3": 2})
    bank.approve_request(request.request_id)
    bank.create_spend_request_from_catalog(child_id, {"spend-3": 1})
    bank.deposit_to_savings(child_id, 10)
    clock.set(FIRST_CUTOVER)
    bank.check_and_perform_daily_reset()
    return bank


def test_missing_blob_falls_back_to_defaults(clock, ids) -> None:
    bank = DadaBank.load(MemorySnapshotStore(), clock=clock, id_factory=ids)

    assert [child.name for child in bank.children] == ["Alex"]
    assert bank.vault.balance == 1000
    assert len(bank.tasks) == 11
    assert len(bank.spend_items) == 6
    assert bank.transactions() == ()
    assert bank.strikes() == ()
    assert bank.logger.events("state_loaded")[-1]["fresh"] is True


def test_save_and_load_round_trip(bank, clock, ids, child_id) -> None:
    _busy_bank(bank, clock, child_id)
    store = MemorySnapshotStore()
    bank.save(store)

    restored = DadaBank.load(store, clock=clock, id_factory=ids)

    assert restored.snapshot() == bank.snapshot()
    assert restored.get_child(child_id).savings == 10
    assert len(restored.pending_requests(child_id)) == 1
    assert len(restored.unshown_approved_requests(child_id)) == 1
    assert not restored.check_and_perform_daily_reset().did_reset


def test_snapshot_is_plain_json(bank, clock, child_id) -> None:
    _busy_bank(bank, clock, child_id)

    data = json.loads(json.dumps(bank.snapshot()))

    assert data["version"] == 1
    assert data["last_reset_date"] == "2024-03-05"
    assert data["transactions"][0]["type"] == "earn"
    assert data["pending_requests"][0]["items"][0]["item_ref"] == "spend-3"


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[]",
        "{}",
        json.dumps({"version": 99}),
    ],
)
def test_corrupt_snapshots_raise(payload: str) -> None:
    with pytest.raises(CorruptStateError):
        from_json(payload)


def test_corrupt_store_propagates_from_load(clock) -> None:
    store = MemorySnapshotStore({STORAGE_KEY: json.dumps({"children": []})})

    with pytest.raises(CorruptStateError):
        DadaBank.load(store, clock=clock)


def test_negative_balances_are_rejected(bank) -> None:
    data = bank.snapshot()
    data["children"][0]["balance"] = -1

    with pytest.raises(CorruptStateError):
        from_json(json.dumps(data))


def test_answered_request_in_pending_list_is_rejected(bank, child_id) -> None:
    give_balance(bank, child_id, 20)
    bank.create_spend_request_from_catalog(child_id, {"spend-3": 1})
    data = bank.snapshot()
    data["pending_requests"][0]["status"] = "approved"

    with pytest.raises(CorruptStateError):
        from_json(json.dumps(data))


def test_unknown_current_child_is_rejected(bank) -> None:
    data = bank.snapshot()
    data["current_child_id"] = "nobody"

    with pytest.raises(CorruptStateError):
        from_json(json.dumps(data))


def test_json_file_store(tmp_path, bank, clock, ids) -> None:
    store = JsonFileSnapshotStore(tmp_path / "data")
    assert store.load(STORAGE_KEY) is None

    bank.save(store)

    assert store.path_for("a/b key").name == "a_b_key.json"
    assert store.path_for(STORAGE_KEY).exists()
    restored = DadaBank.load(store, clock=clock, id_factory=ids)
    assert restored.snapshot() == bank.snapshot()


def test_reset_all_restores_defaults(bank, clock, child_id) -> None:
    _busy_bank(bank, clock, child_id)

    bank.reset_all()

    assert bank.transactions() == ()
    assert bank.pending_requests() == ()
    assert bank.vault.balance == 1000
    assert bank.last_reset_date == "2024-03-05"
    assert bank.children[0].id != child_id
