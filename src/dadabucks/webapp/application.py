"""FastAPI frontend exposing the Dada Bucks engine as JSON endpoints.

Every engine call goes through one lock so the single-writer engine can be
shared by the request threadpool and the background reset poller. State is
saved after each successful mutation and after an auto-denied approval.
"""

from __future__ import annotations

import asyncio
import threading
from contextlib import asynccontextmanager, suppress
from typing import Callable, Dict, List, Optional

from fastapi import FastAPI, Form, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.middleware.sessions import SessionMiddleware

from ..clock import Clock
from ..config import BankConfig, load_config
from ..exceptions import DadaBucksError, ErrorCode
from ..models import (
    ChildUpdate,
    OperationResult,
    ResetOutcome,
    SpendCategory,
    SpendItemDraft,
    SpendItemUpdate,
    TaskCategory,
    TaskDraft,
    TaskUpdate,
    UserRole,
)
from ..service import DadaBank
from ..storage import SnapshotStore
from .config import SESSION_CHILD_KEY, SESSION_ROLE_KEY, WebSettings, load_web_settings
from .persistence import SqlSnapshotStore, make_engine

_ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
}


def _respond(result: OperationResult) -> JSONResponse:
    if result.success:
        return JSONResponse(result.as_dict())
    status = _ERROR_STATUS.get(result.error, 409) if result.error else 400
    return JSONResponse(result.as_dict(), status_code=status)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"success": False, "message": message, "error": "bad_request"}, status_code=400)


def _parse_task_category(raw: Optional[str]) -> Optional[TaskCategory]:
    return TaskCategory(raw) if raw else None


def _parse_spend_category(raw: Optional[str]) -> Optional[SpendCategory]:
    return SpendCategory(raw) if raw else None


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------
def session_role(request: Request) -> UserRole:
    return UserRole(request.session.get(SESSION_ROLE_KEY, UserRole.CHILD.value))


def require_parent(request: Request) -> Optional[JSONResponse]:
    if session_role(request) is not UserRole.PARENT:
        return JSONResponse(
            {"success": False, "message": "Parent mode is locked", "error": "parent_required"},
            status_code=403,
        )
    return None


def create_app(
    bank: DadaBank | None = None,
    *,
    store: SnapshotStore | None = None,
    settings: WebSettings | None = None,
    config: BankConfig | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Build the application around ``bank`` (loaded from ``store`` when omitted)."""

    settings = settings or load_web_settings()
    if store is None:
        store = SqlSnapshotStore(make_engine(settings.sqlite_file))
    if bank is None:
        bank = DadaBank.load(store, settings.storage_key, config=config or load_config(), clock=clock)
    lock = threading.RLock()
    key = settings.storage_key

    def run_daily_reset() -> ResetOutcome:
        with lock:
            outcome = bank.check_and_perform_daily_reset()
            if outcome.did_reset:
                bank.save(store, key)
                bank.logger.log(
                    "daily_reset_saved", deposited=outcome.earnings_deposited, interest=outcome.interest_earned
                )
        return outcome

    def mutate(action: Callable[[], OperationResult]) -> JSONResponse:
        with lock:
            result = action()
            if result.success or result.get("auto_denied"):
                bank.save(store, key)
        return _respond(result)

    async def poll_resets() -> None:
        while True:
            await asyncio.sleep(settings.reset_poll_seconds)
            await asyncio.to_thread(run_daily_reset)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        run_daily_reset()
        poller = asyncio.create_task(poll_resets()) if settings.reset_poll_seconds > 0 else None
        try:
            yield
        finally:
            if poller is not None:
                poller.cancel()
                with suppress(asyncio.CancelledError):
                    await poller

    app = FastAPI(title="Dada Bucks", lifespan=lifespan)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        same_site="lax",
        max_age=None,
    )
    app.state.bank = bank
    app.state.store = store
    app.state.lock = lock

    def current_child(request: Request, child_id: Optional[str]) -> str:
        return child_id or request.session.get(SESSION_CHILD_KEY) or bank.current_child_id

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------
    @app.get("/state")
    def read_state(request: Request) -> JSONResponse:
        with lock:
            data = bank.snapshot()
            data["next_reset_time"] = bank.next_reset_time().isoformat()
            data["parent_challenge"] = bank.parent_challenge
            data["current_child_id"] = current_child(request, None)
        data["role"] = session_role(request).value
        return JSONResponse(data)

    @app.get("/children/{child_id}/stats")
    def child_stats(child_id: str) -> JSONResponse:
        with lock:
            try:
                bank.get_child(child_id)
            except DadaBucksError as exc:
                return JSONResponse({"success": False, "message": str(exc), "error": exc.code.value}, status_code=404)
            stats = bank.today_stats(child_id)
        return JSONResponse({"earned": stats.earned, "spent": stats.spent, "strikes": stats.strikes})

    @app.get("/transactions")
    def list_transactions(child_id: Optional[str] = Query(None)) -> JSONResponse:
        with lock:
            entries = bank.transactions(child_id)
        return JSONResponse(
            [
                {
                    "id": entry.id,
                    "child_id": entry.child_id,
                    "type": entry.type.value,
                    "amount": entry.amount,
                    "description": entry.description,
                    "timestamp": entry.timestamp.isoformat(),
                }
                for entry in entries
            ]
        )

    @app.get("/transactions.csv")
    def export_transactions(child_id: Optional[str] = Query(None)) -> StreamingResponse:
        with lock:
            payload = bank.export_transactions_csv(child_id)
        return StreamingResponse(
            iter([payload]),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=dada-bucks-ledger.csv"},
        )

    @app.get("/notifications")
    def unshown_notifications(request: Request, child_id: Optional[str] = Query(None)) -> JSONResponse:
        target = current_child(request, child_id)
        with lock:
            pending = bank.unshown_approved_requests(target)
        return JSONResponse(
            [
                {
                    "request_id": item.request_id,
                    "child_id": item.child_id,
                    "items": [
                        {"name": entry.name, "icon": entry.icon, "quantity": entry.quantity} for entry in item.items
                    ],
                    "total_cost": item.total_cost,
                    "approved_at": item.approved_at.isoformat(),
                }
                for item in pending
            ]
        )

    # ------------------------------------------------------------------
    # Session: parent mode and child selection
    # ------------------------------------------------------------------
    @app.get("/parent/challenge")
    def parent_challenge() -> JSONResponse:
        return JSONResponse({"question": bank.parent_challenge})

    @app.post("/parent/unlock")
    def parent_unlock(request: Request, answer: str = Form(...)) -> JSONResponse:
        with lock:
            unlocked = bank.unlock_parent(answer)
        if not unlocked:
            return JSONResponse({"success": False, "message": "Incorrect answer", "error": "parent_required"}, status_code=403)
        request.session[SESSION_ROLE_KEY] = UserRole.PARENT.value
        return JSONResponse({"success": True, "role": UserRole.PARENT.value})

    @app.post("/parent/lock")
    def parent_lock(request: Request) -> JSONResponse:
        with lock:
            bank.lock_parent()
        request.session[SESSION_ROLE_KEY] = UserRole.CHILD.value
        return JSONResponse({"success": True, "role": UserRole.CHILD.value})

    @app.post("/children/select")
    def select_child(request: Request, child_id: str = Form(...)) -> JSONResponse:
        with lock:
            result = bank.select_child(child_id)
        if result.success:
            request.session[SESSION_CHILD_KEY] = child_id
        return _respond(result)

    # ------------------------------------------------------------------
    # Child actions
    # ------------------------------------------------------------------
    @app.post("/tasks/{task_id}/complete")
    def complete_task(request: Request, task_id: str, child_id: Optional[str] = Form(None)) -> JSONResponse:
        target = current_child(request, child_id)
        return mutate(lambda: bank.complete_task(target, task_id))

    @app.post("/tasks/{task_id}/undo")
    def undo_task(request: Request, task_id: str, child_id: Optional[str] = Form(None)) -> JSONResponse:
        target = current_child(request, child_id)
        return mutate(lambda: bank.undo_task_completion(target, task_id))

    @app.post("/savings/deposit")
    def savings_deposit(request: Request, amount: str = Form(...), child_id: Optional[str] = Form(None)) -> JSONResponse:
        target = current_child(request, child_id)
        return mutate(lambda: bank.deposit_to_savings(target, amount))

    @app.post("/savings/withdraw")
    def savings_withdraw(request: Request, amount: str = Form(...), child_id: Optional[str] = Form(None)) -> JSONResponse:
        target = current_child(request, child_id)
        return mutate(lambda: bank.withdraw_from_savings(target, amount))

    @app.post("/requests")
    def create_request(
        request: Request,
        item_id: List[str] = Form(...),
        quantity: List[int] = Form(...),
        child_id: Optional[str] = Form(None),
    ) -> JSONResponse:
        if len(item_id) != len(quantity):
            return _bad_request("Each item needs a quantity")
        target = current_child(request, child_id)
        selections: Dict[str, int] = {}
        for ref, count in zip(item_id, quantity):
            selections[ref] = selections.get(ref, 0) + count
        return mutate(lambda: bank.create_spend_request_from_catalog(target, selections))

    @app.post("/requests/{request_id}/cancel")
    def cancel_request(request_id: str) -> JSONResponse:
        return mutate(lambda: bank.cancel_spend_request(request_id))

    @app.post("/notifications/{request_id}/shown")
    def notification_shown(request_id: str) -> JSONResponse:
        return mutate(lambda: bank.mark_notification_shown(request_id))

    # ------------------------------------------------------------------
    # Parent actions
    # ------------------------------------------------------------------
    @app.post("/requests/{request_id}/approve")
    def approve_request(request: Request, request_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.approve_request(request_id))

    @app.post("/requests/{request_id}/deny")
    def deny_request(request: Request, request_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.deny_request(request_id))

    @app.post("/strikes")
    def add_strike(request: Request, child_id: str = Form(...), reason: str = Form("")) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.add_strike(child_id, reason))

    @app.post("/strikes/{strike_id}/delete")
    def remove_strike(request: Request, strike_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.remove_strike(strike_id))

    @app.post("/strikes/reset")
    def reset_strikes(request: Request) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(bank.reset_strikes)

    @app.post("/vault/add")
    def vault_add(request: Request, amount: str = Form(...)) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.add_to_vault(amount))

    @app.post("/vault/remove")
    def vault_remove(request: Request, amount: str = Form(...)) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.remove_from_vault(amount))

    @app.post("/tasks")
    def create_task(
        request: Request,
        name: str = Form(...),
        icon: str = Form("✅"),
        payout: int = Form(...),
        daily_max: int = Form(1),
        category: str = Form(TaskCategory.OTHER.value),
    ) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        try:
            parsed = _parse_task_category(category) or TaskCategory.OTHER
        except ValueError:
            return _bad_request(f"Unknown category {category!r}")
        draft = TaskDraft(name=name, icon=icon, payout=payout, daily_max=daily_max, category=parsed)
        return mutate(lambda: bank.add_task(draft))

    @app.post("/tasks/{task_id}/update")
    def update_task(
        request: Request,
        task_id: str,
        name: Optional[str] = Form(None),
        icon: Optional[str] = Form(None),
        payout: Optional[int] = Form(None),
        daily_max: Optional[int] = Form(None),
        category: Optional[str] = Form(None),
    ) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        try:
            parsed = _parse_task_category(category)
        except ValueError:
            return _bad_request(f"Unknown category {category!r}")
        update = TaskUpdate(name=name, icon=icon, payout=payout, daily_max=daily_max, category=parsed)
        return mutate(lambda: bank.update_task(task_id, update))

    @app.post("/tasks/{task_id}/toggle")
    def toggle_task(request: Request, task_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.toggle_task_active(task_id))

    @app.post("/tasks/{task_id}/delete")
    def delete_task(request: Request, task_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.delete_task(task_id))

    @app.post("/items")
    def create_item(
        request: Request,
        name: str = Form(...),
        icon: str = Form("🎁"),
        unit_cost: int = Form(...),
        quantity: int = Form(1),
        max_quantity: int = Form(1),
        category: str = Form(SpendCategory.TREATS.value),
        description: str = Form(""),
    ) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        try:
            parsed = _parse_spend_category(category) or SpendCategory.TREATS
        except ValueError:
            return _bad_request(f"Unknown category {category!r}")
        draft = SpendItemDraft(
            name=name,
            icon=icon,
            unit_cost=unit_cost,
            quantity=quantity,
            max_quantity=max_quantity,
            category=parsed,
            description=description,
        )
        return mutate(lambda: bank.add_spend_item(draft))

    @app.post("/items/{item_id}/update")
    def update_item(
        request: Request,
        item_id: str,
        name: Optional[str] = Form(None),
        icon: Optional[str] = Form(None),
        unit_cost: Optional[int] = Form(None),
        quantity: Optional[int] = Form(None),
        max_quantity: Optional[int] = Form(None),
        category: Optional[str] = Form(None),
        description: Optional[str] = Form(None),
    ) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        try:
            parsed = _parse_spend_category(category)
        except ValueError:
            return _bad_request(f"Unknown category {category!r}")
        update = SpendItemUpdate(
            name=name,
            icon=icon,
            unit_cost=unit_cost,
            quantity=quantity,
            max_quantity=max_quantity,
            category=parsed,
            description=description,
        )
        return mutate(lambda: bank.update_spend_item(item_id, update))

    @app.post("/items/{item_id}/delete")
    def delete_item(request: Request, item_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.delete_spend_item(item_id))

    @app.post("/children")
    def create_child(request: Request, name: str = Form(...), avatar: str = Form("")) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.add_child(name, avatar))

    @app.post("/children/{child_id}/update")
    def update_child(
        request: Request,
        child_id: str,
        name: Optional[str] = Form(None),
        avatar: Optional[str] = Form(None),
    ) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        return mutate(lambda: bank.update_child(child_id, ChildUpdate(name=name, avatar=avatar)))

    @app.post("/children/{child_id}/delete")
    def delete_child(request: Request, child_id: str) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        response = mutate(lambda: bank.delete_child(child_id))
        if response.status_code == 200 and request.session.get(SESSION_CHILD_KEY) == child_id:
            request.session.pop(SESSION_CHILD_KEY, None)
        return response

    @app.post("/daily-reset")
    def daily_reset(request: Request) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        outcome = run_daily_reset()
        return JSONResponse(
            {
                "did_reset": outcome.did_reset,
                "earnings_deposited": outcome.earnings_deposited,
                "interest_earned": outcome.interest_earned,
            }
        )

    @app.post("/reset-all")
    def reset_all(request: Request) -> JSONResponse:
        if (denied := require_parent(request)) is not None:
            return denied
        request.session.clear()
        return mutate(bank.reset_all)

    return app


__all__ = ["create_app", "require_parent", "session_role"]
