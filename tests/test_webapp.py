from typing import Iterator

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("sqlmodel")
from fastapi.testclient import TestClient

from conftest import FIRST_CUTOVER, give_balance

from dadabucks.config import STORAGE_KEY
from dadabucks.models import RequestStatus
from dadabucks.service import DadaBank
from dadabucks.webapp.application import create_app
from dadabucks.webapp.config import WebSettings, load_web_settings
from dadabucks.webapp.persistence import SnapshotRecord, SqlSnapshotStore, make_engine


@pytest.fixture
def store(tmp_path) -> SqlSnapshotStore:
    return SqlSnapshotStore(make_engine(tmp_path / "dadabucks.db"))


@pytest.fixture
def settings() -> WebSettings:
    return WebSettings(session_secret="test-secret", reset_poll_seconds=0)


@pytest.fixture
def client(bank, store, settings) -> Iterator[TestClient]:
    with TestClient(create_app(bank, store=store, settings=settings)) as test_client:
        yield test_client


def unlock(client: TestClient) -> None:
    response = client.post("/parent/unlock", data={"answer": "12"})
    assert response.status_code == 200


def test_sql_store_round_trip(store) -> None:
    assert store.load("missing") is None

    store.save("key", "one")
    store.save("key", "two")

    assert store.load("key") == "two"


def test_snapshot_records_use_aware_timestamps() -> None:
    record = SnapshotRecord(k="key", v="{}")

    assert record.updated_at.tzinfo is not None


def test_completing_a_task_persists_state(client, store, child_id) -> None:
    response = client.post("/tasks/task-2/complete", data={"child_id": child_id})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["earned"] == 5
    restored = DadaBank.load(store)
    assert restored.get_child(child_id).pending_earnings == 5


def test_business_failures_map_to_status_codes(client, child_id) -> None:
    missing = client.post("/tasks/nope/complete", data={"child_id": child_id})
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"

    client.post("/tasks/task-1/complete", data={"child_id": child_id})
    capped = client.post("/tasks/task-1/complete", data={"child_id": child_id})
    assert capped.status_code == 409
    assert capped.json()["error"] == "daily_cap_reached"


def test_parent_endpoints_require_the_challenge(client, child_id) -> None:
    blocked = client.post("/strikes", data={"child_id": child_id, "reason": "Shouting"})
    assert blocked.status_code == 403

    wrong = client.post("/parent/unlock", data={"answer": "13"})
    assert wrong.status_code == 403

    unlock(client)
    allowed = client.post("/strikes", data={"child_id": child_id, "reason": "Shouting"})
    assert allowed.status_code == 200
    assert allowed.json()["count"] == 1

    client.post("/parent/lock")
    assert client.post("/strikes/reset").status_code == 403


def test_spend_request_flow(client, bank, child_id) -> None:
    give_balance(bank, child_id, 50)
    client.post("/children/select", data={"child_id": child_id})

    created = client.post("/requests", data={"item_id": ["spend-3", "spend-1"], "quantity": ["2", "1"]})
    assert created.status_code == 200
    request_id = created.json()["request_id"]
    assert created.json()["total_cost"] == 30

    unlock(client)
    approved = client.post(f"/requests/{request_id}/approve")
    assert approved.status_code == 200

    notifications = client.get("/notifications").json()
    assert [item["request_id"] for item in notifications] == [request_id]
    assert client.post(f"/notifications/{request_id}/shown").status_code == 200
    assert client.get("/notifications").json() == []
    assert bank.get_child(child_id).balance == 20


def test_task_management_endpoints(client, bank) -> None:
    unlock(client)

    created = client.post("/tasks", data={"name": "Feed the cat", "payout": "4", "daily_max": "2", "category": "helping"})
    task_id = created.json()["task_id"]
    assert client.post(f"/tasks/{task_id}/update", data={"payout": "6"}).status_code == 200
    assert bank.get_task(task_id).payout == 6
    assert client.post(f"/tasks/{task_id}/toggle").json()["is_active"] is False
    assert client.post("/tasks", data={"name": "X", "payout": "1", "category": "bogus"}).status_code == 400
    assert client.post(f"/tasks/{task_id}/delete").status_code == 200


def test_state_and_exports(client, bank, child_id) -> None:
    give_balance(bank, child_id, 20)
    client.post("/savings/deposit", data={"amount": "5", "child_id": child_id})

    state = client.get("/state").json()
    assert state["children"][0]["savings"] == 5
    assert state["next_reset_time"] == "2024-03-04T22:00:00"
    assert state["parent_challenge"] == "7 + 5 = ?"
    assert state["role"] == "child"

    export = client.get("/transactions.csv", params={"child_id": child_id})
    assert export.headers["content-type"].startswith("text/csv")
    assert "savings_deposit" in export.text

    stats = client.get(f"/children/{child_id}/stats").json()
    assert stats == {"earned": 0, "spent": 0, "strikes": 0}
    assert client.get("/children/nobody/stats").status_code == 404


def test_startup_runs_the_reset_check(bank, clock, store, settings, child_id) -> None:
    bank.complete_task(child_id, "task-2")
    clock.set(FIRST_CUTOVER)

    with TestClient(create_app(bank, store=store, settings=settings)):
        assert bank.get_child(child_id).balance == 5
        assert bank.logger.events("daily_reset_saved")[-1]["deposited"] == 5

    assert DadaBank.load(store).get_child(child_id).balance == 5


def test_web_settings_from_environment() -> None:
    settings = load_web_settings(
        {"DADABUCKS_SESSION_SECRET": "s3cret", "DADABUCKS_SQLITE": "/tmp/x.db", "DADABUCKS_RESET_POLL_SECONDS": "5"}
    )

    assert settings.session_secret == "s3cret"
    assert settings.sqlite_file == "/tmp/x.db"
    assert settings.reset_poll_seconds == 5
    assert settings.storage_key == STORAGE_KEY


def test_repeated_items_in_a_request_are_combined(client, bank, child_id) -> None:
    give_balance(bank, child_id, 50)

    created = client.post(
        "/requests", data={"item_id": ["spend-3", "spend-3"], "quantity": ["1", "2"], "child_id": child_id}
    )

    assert created.status_code == 200
    assert created.json()["total_cost"] == 15
    (pending,) = bank.pending_requests(child_id)
    assert [(item.item_ref, item.quantity) for item in pending.items] == [("spend-3", 3)]


def test_auto_denied_approval_is_persisted(client, bank, store, child_id) -> None:
    give_balance(bank, child_id, 50)
    created = client.post("/requests", data={"item_id": ["spend-0"], "quantity": ["1"], "child_id": child_id})
    request_id = created.json()["request_id"]
    client.post("/savings/deposit", data={"amount": "30", "child_id": child_id})

    unlock(client)
    approved = client.post(f"/requests/{request_id}/approve")

    assert approved.status_code == 409
    assert approved.json()["auto_denied"] is True
    restored = DadaBank.load(store)
    assert restored.pending_requests(child_id) == ()
    assert [(entry.id, entry.status) for entry in restored.request_history(child_id)] == [
        (request_id, RequestStatus.DENIED)
    ]
