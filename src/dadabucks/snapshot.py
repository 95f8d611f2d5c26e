"""Convert engine state to and from a single JSON-friendly blob."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Dict, Mapping

from .config import BankConfig
from .exceptions import CorruptStateError, DadaBucksError
from .ledger import TransactionLog
from .models import (
    ApprovedRequestNotification,
    ChildProfile,
    RequestItem,
    RequestStatus,
    SpendItem,
    SpendRequest,
    Strike,
    Task,
    Transaction,
    TransactionType,
)
from .notifications import ApprovalNotifications
from .spending import SpendCatalog, SpendRequestBook
from .state import BankState, IdFactory, random_id
from .strikes import StrikeLedger
from .tasks import TaskRegistry
from .vault import Vault

SNAPSHOT_VERSION = 1


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def _child(child: ChildProfile) -> Dict[str, Any]:
    return {
        "id": child.id,
        "name": child.name,
        "avatar": child.avatar,
        "balance": child.balance,
        "savings": child.savings,
        "savings_interest_accrued": child.savings_interest_accrued,
        "pending_earnings": child.pending_earnings,
        "total_earned": child.total_earned,
        "total_spent": child.total_spent,
        "last_interest_date": child.last_interest_date,
    }


def _task(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "icon": task.icon,
        "payout": task.payout,
        "daily_max": task.daily_max,
        "completions": task.completions,
        "is_active": task.is_active,
        "category": task.category.value,
    }


def _spend_item(item: SpendItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "icon": item.icon,
        "unit_cost": item.unit_cost,
        "quantity": item.quantity,
        "max_quantity": item.max_quantity,
        "category": item.category.value,
        "description": item.description,
    }


def _request_item(item: RequestItem) -> Dict[str, Any]:
    return {
        "item_ref": item.item_ref,
        "name": item.name,
        "icon": item.icon,
        "unit_cost": item.unit_cost,
        "quantity": item.quantity,
    }


def _request(request: SpendRequest) -> Dict[str, Any]:
    return {
        "id": request.id,
        "child_id": request.child_id,
        "items": [_request_item(item) for item in request.items],
        "total_cost": request.total_cost,
        "status": request.status.value,
        "requested_at": request.requested_at.isoformat(),
        "responded_at": request.responded_at.isoformat() if request.responded_at else None,
    }


def _notification(notification: ApprovedRequestNotification) -> Dict[str, Any]:
    return {
        "request_id": notification.request_id,
        "child_id": notification.child_id,
        "items": [_request_item(item) for item in notification.items],
        "total_cost": notification.total_cost,
        "approved_at": notification.approved_at.isoformat(),
        "shown_to_child": notification.shown_to_child,
    }


def _strike(strike: Strike) -> Dict[str, Any]:
    return {
        "id": strike.id,
        "child_id": strike.child_id,
        "reason": strike.reason,
        "timestamp": strike.timestamp.isoformat(),
        "day": strike.day,
    }


def _transaction(transaction: Transaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "child_id": transaction.child_id,
        "type": transaction.type.value,
        "amount": transaction.amount,
        "description": transaction.description,
        "timestamp": transaction.timestamp.isoformat(),
        "metadata": dict(transaction.metadata),
    }


def dump_state(state: BankState) -> Dict[str, Any]:
    """Return the persisted part of ``state`` as plain data."""

    return {
        "version": SNAPSHOT_VERSION,
        "children": [_child(child) for child in state.children],
        "current_child_id": state.current_child_id,
        "vault": {
            "balance": state.vault.balance,
            "max_balance": state.vault.max_balance,
            "daily_allowance": state.vault.daily_allowance,
        },
        "tasks": [_task(task) for task in state.tasks.tasks()],
        "spend_items": [_spend_item(item) for item in state.spend_items.items()],
        "transactions": [_transaction(entry) for entry in state.transactions.entries],
        "pending_requests": [_request(request) for request in state.requests.pending],
        "request_history": [_request(request) for request in state.requests.history],
        "approved_notifications": [_notification(item) for item in state.notifications.all()],
        "strikes": [_strike(strike) for strike in state.strikes.strikes()],
        "last_reset_date": state.last_reset_date,
    }


def to_json(state: BankState) -> str:
    return json.dumps(dump_state(state), sort_keys=True, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
def _load_request_item(data: Mapping[str, Any]) -> RequestItem:
    return RequestItem(
        item_ref=data["item_ref"],
        name=data["name"],
        icon=data.get("icon", ""),
        unit_cost=int(data["unit_cost"]),
        quantity=int(data["quantity"]),
    )


def _load_request(data: Mapping[str, Any]) -> SpendRequest:
    responded = data.get("responded_at")
    return SpendRequest(
        id=data["id"],
        child_id=data["child_id"],
        items=tuple(_load_request_item(item) for item in data["items"]),
        total_cost=int(data["total_cost"]),
        status=RequestStatus(data["status"]),
        requested_at=datetime.fromisoformat(data["requested_at"]),
        responded_at=datetime.fromisoformat(responded) if responded else None,
    )


def _decode(data: Mapping[str, Any], config: BankConfig, id_factory: IdFactory) -> BankState:
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise CorruptStateError(f"Unsupported snapshot version {version!r}")
    children = [ChildProfile(**child) for child in data["children"]]
    if not children:
        raise CorruptStateError("Snapshot contains no children")
    vault_data = data["vault"]
    last_reset = data["last_reset_date"]
    date.fromisoformat(last_reset)
    current_child_id = data.get("current_child_id", "")
    if current_child_id and current_child_id not in {child.id for child in children}:
        raise CorruptStateError(f"Current child {current_child_id!r} is not in the roster")
    pending = [_load_request(item) for item in data["pending_requests"]]
    if any(request.status is not RequestStatus.PENDING for request in pending):
        raise CorruptStateError("Pending request list holds a request that is already answered")
    return BankState(
        children=children,
        vault=Vault(
            balance=int(vault_data["balance"]),
            max_balance=int(vault_data.get("max_balance", config.vault_max)),
            daily_allowance=int(vault_data.get("daily_allowance", config.daily_allowance)),
        ),
        tasks=TaskRegistry(Task(**task) for task in data["tasks"]),
        spend_items=SpendCatalog(SpendItem(**item) for item in data["spend_items"]),
        transactions=TransactionLog(
            (
                Transaction(
                    id=entry["id"],
                    child_id=entry["child_id"],
                    type=TransactionType(entry["type"]),
                    amount=int(entry["amount"]),
                    description=entry["description"],
                    timestamp=datetime.fromisoformat(entry["timestamp"]),
                    metadata=dict(entry.get("metadata") or {}),
                )
                for entry in data["transactions"]
            ),
            id_factory=id_factory,
        ),
        requests=SpendRequestBook(
            pending,
            (_load_request(item) for item in data["request_history"]),
            id_factory=id_factory,
        ),
        notifications=ApprovalNotifications(
            ApprovedRequestNotification(
                request_id=item["request_id"],
                child_id=item["child_id"],
                items=tuple(_load_request_item(entry) for entry in item["items"]),
                total_cost=int(item["total_cost"]),
                approved_at=datetime.fromisoformat(item["approved_at"]),
                shown_to_child=bool(item["shown_to_child"]),
            )
            for item in data["approved_notifications"]
        ),
        strikes=StrikeLedger(
            (
                Strike(
                    id=item["id"],
                    child_id=item["child_id"],
                    reason=item["reason"],
                    timestamp=datetime.fromisoformat(item["timestamp"]),
                    day=item["day"],
                )
                for item in data["strikes"]
            ),
            max_strikes=config.max_strikes,
            id_factory=id_factory,
        ),
        last_reset_date=last_reset,
        current_child_id=current_child_id,
    )


def load_state(
    data: Mapping[str, Any], *, config: BankConfig | None = None, id_factory: IdFactory = random_id
) -> BankState:
    """Rebuild a :class:`BankState`; malformed data raises :class:`CorruptStateError`."""

    try:
        return _decode(data, config or BankConfig(), id_factory)
    except CorruptStateError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError, DadaBucksError) as exc:
        raise CorruptStateError(f"Snapshot could not be decoded: {exc}") from exc


def from_json(
    payload: str, *, config: BankConfig | None = None, id_factory: IdFactory = random_id
) -> BankState:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise CorruptStateError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CorruptStateError("Snapshot must be a JSON object")
    return load_state(data, config=config, id_factory=id_factory)


__all__ = ["SNAPSHOT_VERSION", "dump_state", "from_json", "load_state", "to_json"]
