"""High level engine coordinating children, the vault and the daily cycle."""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Sequence, Tuple

from .clock import Clock, ResetPolicy, SystemClock, day_key
from .config import STORAGE_KEY, BankConfig
from .exceptions import (
    DadaBucksError,
    ErrorCode,
    InsufficientBalanceError,
    InvalidAmountError,
    LastChildProtectedError,
    NotFoundError,
    RequestAlreadyPendingError,
    StrikesExhaustedError,
)
from .i18n import Translator
from .interest import InterestCalculator, InterestResult
from .models import (
    ApprovedRequestNotification,
    ChildProfile,
    ChildUpdate,
    DailyStats,
    OperationResult,
    RequestItem,
    ResetOutcome,
    SpendItem,
    SpendItemDraft,
    SpendItemUpdate,
    SpendRequest,
    Strike,
    Task,
    TaskDraft,
    TaskUpdate,
    Transaction,
    TransactionType,
    require_name,
)
from .money import AmountLike, require_positive, to_units
from .ops import StructuredLogger
from .security import ParentLock
from .snapshot import dump_state, from_json, to_json
from .state import BankState, IdFactory, random_id
from .storage import SnapshotStore
from .vault import Vault

_NOT_FOUND_SUBJECTS = (
    ("notification_id", "notification"),
    ("strike_id", "strike"),
    ("item_id", "item"),
    ("task_id", "task"),
    ("request_id", "request"),
    ("child_id", "child"),
)


class DadaBank:
    """Own the household state and apply every rule that changes it.

    Operations return :class:`OperationResult` for expected failures; only
    :class:`CorruptStateError` and programming errors escape. The engine is
    not thread safe; callers that share one instance serialize access.
    """

    __slots__ = (
        "_state",
        "_config",
        "_clock",
        "_ids",
        "_policy",
        "_interest",
        "_logger",
        "_translator",
        "_parent_lock",
    )

    def __init__(
        self,
        state: BankState | None = None,
        *,
        config: BankConfig | None = None,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        logger: StructuredLogger | None = None,
        translator: Translator | None = None,
    ) -> None:
        self._config = config or BankConfig()
        self._clock = clock or SystemClock()
        self._ids = id_factory or random_id
        self._policy = ResetPolicy(self._config.reset_hour)
        self._interest = InterestCalculator(
            self._config.interest_rate, carry_forward=self._config.carry_interest_forward
        )
        self._logger = logger or StructuredLogger(time_source=self._clock.now)
        self._translator = translator or Translator(self._config.locale)
        self._parent_lock = ParentLock(self._config.parent_challenge)
        self._state = state or BankState.fresh(self._config, today=self._today(), id_factory=self._ids)
        if not self._state.current_child_id:
            self._state.current_child_id = self._state.children[0].id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    @classmethod
    def load(
        cls,
        store: SnapshotStore,
        key: str = STORAGE_KEY,
        *,
        config: BankConfig | None = None,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
        logger: StructuredLogger | None = None,
        translator: Translator | None = None,
    ) -> "DadaBank":
        """Restore a bank from ``store``; start fresh when nothing was saved."""

        config = config or BankConfig()
        ids = id_factory or random_id
        payload = store.load(key)
        state = from_json(payload, config=config, id_factory=ids) if payload else None
        bank = cls(state, config=config, clock=clock, id_factory=ids, logger=logger, translator=translator)
        bank._logger.log("state_loaded", key=key, fresh=state is None)
        return bank

    def save(self, store: SnapshotStore, key: str = STORAGE_KEY) -> None:
        store.save(key, to_json(self._state))

    def snapshot(self) -> dict:
        """Return a plain-data copy of the persisted state."""

        return dump_state(self._state)

    def reset_all(self) -> OperationResult:
        """Discard everything and start again from the defaults."""

        self._state = BankState.fresh(self._config, today=self._today(), id_factory=self._ids)
        self._state.current_child_id = self._state.children[0].id
        self._parent_lock = ParentLock(self._config.parent_challenge)
        self._logger.log("state_reset")
        return OperationResult.ok("All data reset")

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def config(self) -> BankConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    @property
    def translator(self) -> Translator:
        return self._translator

    @property
    def children(self) -> Tuple[ChildProfile, ...]:
        return tuple(self._state.children)

    @property
    def current_child_id(self) -> str:
        return self._state.current_child_id

    @property
    def vault(self) -> Vault:
        return self._state.vault

    @property
    def last_reset_date(self) -> str:
        return self._state.last_reset_date

    @property
    def tasks(self) -> Sequence[Task]:
        return self._state.tasks.tasks()

    @property
    def spend_items(self) -> Sequence[SpendItem]:
        return self._state.spend_items.items()

    def get_child(self, child_id: str) -> ChildProfile:
        for child in self._state.children:
            if child.id == child_id:
                return child
        raise NotFoundError(f"Child '{child_id}' not found.", child_id=child_id)

    def get_task(self, task_id: str) -> Task:
        return self._state.tasks.get(task_id)

    def pending_requests(self, child_id: str | None = None) -> Sequence[SpendRequest]:
        pending = self._state.requests.pending
        if child_id is None:
            return pending
        return tuple(request for request in pending if request.child_id == child_id)

    def request_history(self, child_id: str | None = None) -> Sequence[SpendRequest]:
        history = self._state.requests.history
        if child_id is None:
            return history
        return tuple(request for request in history if request.child_id == child_id)

    def strikes(self, child_id: str | None = None, *, day: str | None = None) -> Sequence[Strike]:
        return self._state.strikes.strikes(child_id=child_id, day=day)

    def today_strike_count(self, child_id: str) -> int:
        return self._state.strikes.count(child_id, self._today())

    def total_holdings(self) -> int:
        return self._state.total_holdings()

    def transactions(self, child_id: str | None = None) -> Tuple[Transaction, ...]:
        return self._state.transactions.filter(child_id=child_id)

    def today_transactions(self, child_id: str) -> Tuple[Transaction, ...]:
        return self._state.transactions.filter(child_id=child_id, day=self._now().date())

    def today_stats(self, child_id: str) -> DailyStats:
        return self._state.transactions.daily_stats(
            child_id, self._now().date(), strikes=self.today_strike_count(child_id)
        )

    def export_transactions_csv(self, child_id: str | None = None) -> str:
        return self._state.transactions.export_csv(child_id=child_id)

    def next_reset_time(self) -> datetime:
        return self._policy.next_reset_time(self._now())

    def calculate_daily_interest(self, savings_balance: int, carry: int = 0) -> InterestResult:
        return self._interest.calculate(savings_balance, carry)

    # ------------------------------------------------------------------
    # Children and parent mode
    # ------------------------------------------------------------------
    def add_child(self, name: str, avatar: str = "") -> OperationResult:
        try:
            cleaned = require_name(name)
        except DadaBucksError as exc:
            return self._fail(exc, "child")
        child = ChildProfile(
            id=self._ids("child"),
            name=cleaned,
            avatar=avatar or self._config.default_child_avatar,
            last_interest_date=self._today(),
        )
        self._state.children.append(child)
        self._logger.log("child_added", child=child.id)
        return OperationResult.ok(self._t("child.added", name=child.name), child_id=child.id)

    def update_child(self, child_id: str, update: ChildUpdate) -> OperationResult:
        try:
            child = update.apply(self.get_child(child_id))
        except DadaBucksError as exc:
            return self._fail(exc, "child")
        self._logger.log("child_updated", child=child.id)
        return OperationResult.ok(self._t("child.updated"), child_id=child.id)

    def delete_child(self, child_id: str) -> OperationResult:
        """Remove a child, returning their bucks to the vault as far as it has room."""

        try:
            child = self.get_child(child_id)
            if len(self._state.children) == 1:
                raise LastChildProtectedError("The last child cannot be removed.", child_id=child_id)
        except DadaBucksError as exc:
            return self._fail(exc, "child")
        self._state.children.remove(child)
        self._state.requests.discard_child(child.id)
        self._state.notifications.discard_child(child.id)
        self._state.strikes.discard_child(child.id)
        returned = self._state.vault.credit(child.holdings)
        if self._state.current_child_id == child.id:
            self._state.current_child_id = self._state.children[0].id
        self._logger.log("child_deleted", child=child.id, returned=returned)
        return OperationResult.ok(self._t("child.deleted", name=child.name), child_id=child.id, returned=returned)

    def select_child(self, child_id: str) -> OperationResult:
        try:
            child = self.get_child(child_id)
        except DadaBucksError as exc:
            return self._fail(exc, "child")
        self._state.current_child_id = child.id
        return OperationResult.ok(child.name, child_id=child.id)

    @property
    def parent_challenge(self) -> str:
        return self._parent_lock.question

    @property
    def is_parent_locked(self) -> bool:
        return self._parent_lock.is_locked

    def lock_parent(self) -> None:
        self._parent_lock.lock()

    def unlock_parent(self, answer: int | str) -> bool:
        unlocked = self._parent_lock.unlock(answer, at=self._now())
        if not unlocked:
            self._logger.log("parent_unlock_failed", attempts=self._parent_lock.failed_attempts)
        return unlocked

    # ------------------------------------------------------------------
    # Task catalog
    # ------------------------------------------------------------------
    def add_task(self, draft: TaskDraft) -> OperationResult:
        try:
            task = self._state.tasks.add(draft.build(self._ids("task")))
        except DadaBucksError as exc:
            return self._fail(exc, "task")
        self._logger.log("task_added", task=task.id)
        return OperationResult.ok(self._t("task.added"), task_id=task.id)

    def update_task(self, task_id: str, update: TaskUpdate) -> OperationResult:
        try:
            task = self._state.tasks.update(task_id, update)
        except DadaBucksError as exc:
            return self._fail(exc, "task")
        self._logger.log("task_updated", task=task.id)
        return OperationResult.ok(self._t("task.updated"), task_id=task.id)

    def delete_task(self, task_id: str) -> OperationResult:
        try:
            task = self._state.tasks.remove(task_id)
        except DadaBucksError as exc:
            return self._fail(exc, "task")
        self._logger.log("task_deleted", task=task.id)
        return OperationResult.ok(self._t("task.deleted"), task_id=task.id)

    def toggle_task_active(self, task_id: str) -> OperationResult:
        try:
            task = self._state.tasks.toggle_active(task_id)
        except DadaBucksError as exc:
            return self._fail(exc, "task")
        key = "task.activated" if task.is_active else "task.deactivated"
        return OperationResult.ok(self._t(key), task_id=task.id, is_active=task.is_active)

    # ------------------------------------------------------------------
    # Earning
    # ------------------------------------------------------------------
    def complete_task(self, child_id: str, task_id: str) -> OperationResult:
        """Credit one completion of ``task_id`` to the child's pending earnings."""

        vault = self._state.vault
        try:
            child = self.get_child(child_id)
            task = self._state.tasks.get(task_id)
            task.ensure_active()
            if self._state.strikes.is_exhausted(child.id, self._today()):
                raise StrikesExhaustedError(
                    "No earning after the strike limit.", child_id=child.id, max_strikes=self._config.max_strikes
                )
            task.ensure_capacity()
            vault.ensure_covers(task.payout)
        except DadaBucksError as exc:
            return self._fail(exc, "task")
        task.record_completion()
        child.add_pending(task.payout)
        vault.debit(task.payout)
        self._logger.log(
            "task_completed", child=child.id, task=task.id, earned=task.payout, vault=vault.balance
        )
        return OperationResult.ok(
            self._t("task.completed", earned=task.payout, reset_time=self._config.reset_label),
            earned=task.payout,
            child_id=child.id,
            task_id=task.id,
            completions=task.completions,
            remaining_today=task.remaining_today,
        )

    def undo_task_completion(self, child_id: str, task_id: str) -> OperationResult:
        try:
            child = self.get_child(child_id)
            task = self._state.tasks.get(task_id)
            task.undo_completion()
        except DadaBucksError as exc:
            return self._fail(exc, "task")
        removed = child.remove_pending(task.payout)
        returned = self._state.vault.credit(removed)
        self._logger.log("task_undone", child=child.id, task=task.id, removed=removed, returned=returned)
        return OperationResult.ok(
            self._t("task.undone"), child_id=child.id, task_id=task.id, removed=removed
        )

    # ------------------------------------------------------------------
    # Strikes
    # ------------------------------------------------------------------
    def add_strike(self, child_id: str, reason: str = "") -> OperationResult:
        """Record a strike; reaching the limit forfeits the child's pending earnings."""

        now = self._now()
        strikes = self._state.strikes
        try:
            child = self.get_child(child_id)
            strike = strikes.add(child.id, reason, at=now, day=day_key(now))
        except DadaBucksError as exc:
            return self._fail(exc, "strike")
        count = strikes.count(child.id, strike.day)
        max_strikes = strikes.max_strikes
        self._logger.log("strike_added", child=child.id, strike=strike.id, count=count)
        if count < max_strikes:
            return OperationResult.ok(
                self._t("strike.added", count=count, max_strikes=max_strikes, remaining=max_strikes - count),
                child_id=child.id,
                strike_id=strike.id,
                count=count,
                forfeited=0,
            )
        forfeited = child.forfeit_pending()
        returned = self._state.vault.credit(forfeited)
        if forfeited > 0:
            self._state.transactions.record(
                child.id,
                TransactionType.STRIKE_PENALTY,
                -forfeited,
                self._t("desc.strike_penalty", max_strikes=max_strikes),
                at=now,
            )
        self._logger.log("earnings_forfeited", child=child.id, forfeited=forfeited, returned=returned)
        return OperationResult.ok(
            self._t("strike.forfeit", max_strikes=max_strikes, forfeited=forfeited),
            child_id=child.id,
            strike_id=strike.id,
            count=count,
            forfeited=forfeited,
        )

    def remove_strike(self, strike_id: str) -> OperationResult:
        try:
            strike = self._state.strikes.remove(strike_id)
        except DadaBucksError as exc:
            return self._fail(exc, "strike")
        self._logger.log("strike_removed", child=strike.child_id, strike=strike.id)
        return OperationResult.ok(self._t("strike.removed"), child_id=strike.child_id, strike_id=strike.id)

    def reset_strikes(self) -> OperationResult:
        cleared = self._state.strikes.clear()
        self._logger.log("strikes_reset", cleared=cleared)
        return OperationResult.ok(self._t("strike.reset"), cleared=cleared)

    # ------------------------------------------------------------------
    # Daily cycle
    # ------------------------------------------------------------------
    def check_and_perform_daily_reset(self) -> ResetOutcome:
        """Run the nightly settlement when a cutover has elapsed.

        Pending earnings become spendable, savings earn interest, task
        completions start over and earlier strikes are dropped. Calling this
        again before the next cutover does nothing.
        """

        state = self._state
        now = self._now()
        if not self._policy.should_reset(state.last_reset_date, now):
            return ResetOutcome(did_reset=False)
        today = day_key(now)
        deposited = 0
        interest_paid = 0
        for child in state.children:
            released = child.release_pending()
            if released > 0:
                deposited += released
                state.transactions.record(
                    child.id, TransactionType.EARN, released, self._t("desc.earn", amount=released), at=now
                )
            interest = self._interest.calculate(child.savings, child.savings_interest_accrued)
            if interest.whole_units > 0:
                child.savings += interest.whole_units
                interest_paid += interest.whole_units
                state.transactions.record(
                    child.id,
                    TransactionType.INTEREST,
                    interest.whole_units,
                    self._t("desc.interest", amount=interest.whole_units),
                    at=now,
                )
            child.savings_interest_accrued = interest.carry
            child.last_interest_date = today
        state.tasks.reset_completions()
        dropped = state.strikes.retain_day(self._policy.period_key(now))
        state.last_reset_date = today
        self._logger.log(
            "daily_reset", deposited=deposited, interest=interest_paid, strikes_dropped=dropped
        )
        return ResetOutcome(did_reset=True, earnings_deposited=deposited, interest_earned=interest_paid)

    # ------------------------------------------------------------------
    # Savings
    # ------------------------------------------------------------------
    def deposit_to_savings(self, child_id: str, amount: AmountLike) -> OperationResult:
        try:
            child = self.get_child(child_id)
            value = require_positive(to_units(amount))
            child.move_to_savings(value)
        except DadaBucksError as exc:
            return self._fail(exc, "savings")
        self._state.transactions.record(
            child.id,
            TransactionType.SAVINGS_DEPOSIT,
            -value,
            self._t("desc.savings_deposit", amount=value),
            at=self._now(),
        )
        self._logger.log("savings_deposit", child=child.id, amount=value)
        return OperationResult.ok(self._t("savings.deposited", amount=value), child_id=child.id, amount=value)

    def withdraw_from_savings(self, child_id: str, amount: AmountLike) -> OperationResult:
        try:
            child = self.get_child(child_id)
            value = require_positive(to_units(amount))
            child.move_from_savings(value)
        except DadaBucksError as exc:
            return self._fail(exc, "savings")
        self._state.transactions.record(
            child.id,
            TransactionType.SAVINGS_WITHDRAWAL,
            value,
            self._t("desc.savings_withdrawal", amount=value),
            at=self._now(),
        )
        self._logger.log("savings_withdrawal", child=child.id, amount=value)
        return OperationResult.ok(self._t("savings.withdrawn", amount=value), child_id=child.id, amount=value)

    # ------------------------------------------------------------------
    # Spend catalog
    # ------------------------------------------------------------------
    def add_spend_item(self, draft: SpendItemDraft) -> OperationResult:
        try:
            item = self._state.spend_items.add(draft.build(self._ids("spend")))
        except DadaBucksError as exc:
            return self._fail(exc, "item")
        self._logger.log("spend_item_added", item=item.id)
        return OperationResult.ok(self._t("item.added"), item_id=item.id)

    def update_spend_item(self, item_id: str, update: SpendItemUpdate) -> OperationResult:
        try:
            item = self._state.spend_items.update(item_id, update)
        except DadaBucksError as exc:
            return self._fail(exc, "item")
        return OperationResult.ok(self._t("item.updated"), item_id=item.id)

    def delete_spend_item(self, item_id: str) -> OperationResult:
        try:
            item = self._state.spend_items.remove(item_id)
        except DadaBucksError as exc:
            return self._fail(exc, "item")
        self._logger.log("spend_item_deleted", item=item.id)
        return OperationResult.ok(self._t("item.deleted"), item_id=item.id)

    def request_item(self, item_id: str, quantity: Optional[int] = None) -> RequestItem:
        """Snapshot a catalog entry for a request; raises on bad input."""

        return self._state.spend_items.request_item(item_id, quantity)

    # ------------------------------------------------------------------
    # Spend requests
    # ------------------------------------------------------------------
    def create_spend_request(self, child_id: str, items: Sequence[RequestItem]) -> OperationResult:
        """Ask a parent to approve spending; nothing is deducted yet."""

        try:
            child = self.get_child(child_id)
            if self._state.requests.pending_for(child.id) is not None:
                raise RequestAlreadyPendingError("A request is already pending.", child_id=child.id)
            snapshot = tuple(items)
            if not snapshot:
                raise InvalidAmountError("A request needs at least one item.")
            total = sum(item.subtotal for item in snapshot)
            if total > child.balance:
                raise InsufficientBalanceError(
                    "Balance does not cover the request.", balance=child.balance, amount=total
                )
            request = self._state.requests.create(child.id, snapshot, at=self._now())
        except DadaBucksError as exc:
            return self._fail(exc, "request")
        self._logger.log("request_created", child=child.id, request=request.id, total=request.total_cost)
        return OperationResult.ok(
            self._t("request.sent"), child_id=child.id, request_id=request.id, total_cost=request.total_cost
        )

    def create_spend_request_from_catalog(
        self, child_id: str, selections: Mapping[str, int]
    ) -> OperationResult:
        """Build request items from ``{item_id: quantity}`` and submit them."""

        try:
            items = [self.request_item(item_id, quantity) for item_id, quantity in selections.items()]
        except DadaBucksError as exc:
            return self._fail(exc, "request")
        return self.create_spend_request(child_id, items)

    def cancel_spend_request(self, request_id: str) -> OperationResult:
        try:
            request = self._state.requests.cancel(request_id)
        except DadaBucksError as exc:
            return self._fail(exc, "request")
        self._logger.log("request_cancelled", child=request.child_id, request=request.id)
        return OperationResult.ok(self._t("request.cancelled"), child_id=request.child_id, request_id=request.id)

    def approve_request(self, request_id: str) -> OperationResult:
        """Deduct the request total, refill the vault and notify the child.

        A request the child can no longer afford is denied instead.
        """

        state = self._state
        now = self._now()
        try:
            request = state.requests.get_pending(request_id)
            child = self.get_child(request.child_id)
        except DadaBucksError as exc:
            return self._fail(exc, "request")
        if request.total_cost > child.balance:
            state.requests.deny(request.id, at=now)
            self._logger.log("request_auto_denied", child=child.id, request=request.id)
            return self._fail(
                InsufficientBalanceError(
                    "Balance no longer covers the request.", balance=child.balance, amount=request.total_cost
                ),
                "approval",
                request_id=request.id,
                child_id=child.id,
                auto_denied=True,
            )
        child.spend(request.total_cost)
        returned = state.vault.credit(request.total_cost)
        if returned < request.total_cost:
            self._logger.log("vault_overflow", request=request.id, discarded=request.total_cost - returned)
        state.transactions.record(
            child.id,
            TransactionType.SPEND,
            -request.total_cost,
            self._t("desc.spend", items=", ".join(item.name for item in request.items)),
            at=now,
            metadata={"request_id": request.id},
        )
        state.requests.approve(request.id, at=now)
        state.notifications.queue(request, at=now)
        self._logger.log("request_approved", child=child.id, request=request.id, total=request.total_cost)
        return OperationResult.ok(
            self._t("request.approved"), child_id=child.id, request_id=request.id, total_cost=request.total_cost
        )

    def deny_request(self, request_id: str) -> OperationResult:
        try:
            request = self._state.requests.deny(request_id, at=self._now())
        except DadaBucksError as exc:
            return self._fail(exc, "request")
        self._logger.log("request_denied", child=request.child_id, request=request.id)
        return OperationResult.ok(self._t("request.denied"), child_id=request.child_id, request_id=request.id)

    # ------------------------------------------------------------------
    # Approval notifications
    # ------------------------------------------------------------------
    def unshown_approved_requests(self, child_id: str | None = None) -> Sequence[ApprovedRequestNotification]:
        return self._state.notifications.unshown(child_id=child_id)

    def next_unshown_notification(self, child_id: str | None = None) -> Optional[ApprovedRequestNotification]:
        return self._state.notifications.next_unshown(child_id=child_id)

    def mark_notification_shown(self, request_id: str) -> OperationResult:
        try:
            notification = self._state.notifications.mark_shown(request_id)
        except DadaBucksError as exc:
            return self._fail(exc, "notification")
        return OperationResult.ok(
            self._t("notification.shown"), child_id=notification.child_id, request_id=notification.request_id
        )

    # ------------------------------------------------------------------
    # Vault administration
    # ------------------------------------------------------------------
    def add_to_vault(self, amount: AmountLike) -> OperationResult:
        """Top the vault up; anything above the cap is discarded."""

        try:
            value = require_positive(to_units(amount))
        except DadaBucksError as exc:
            return self._fail(exc, "vault")
        absorbed = self._state.vault.credit(value)
        if absorbed < value:
            self._logger.log("vault_overflow", discarded=value - absorbed)
        self._logger.log("vault_added", amount=absorbed, balance=self._state.vault.balance)
        return OperationResult.ok(
            self._t("vault.added", amount=absorbed), amount=absorbed, balance=self._state.vault.balance
        )

    def remove_from_vault(self, amount: AmountLike) -> OperationResult:
        try:
            value = self._state.vault.debit(to_units(amount))
        except DadaBucksError as exc:
            return self._fail(exc, "vault")
        self._logger.log("vault_removed", amount=value, balance=self._state.vault.balance)
        return OperationResult.ok(
            self._t("vault.removed", amount=value), amount=value, balance=self._state.vault.balance
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _now(self) -> datetime:
        return self._clock.now()

    def _today(self) -> str:
        return day_key(self._now())

    def _t(self, key: str, **fields: object) -> str:
        return self._translator.translate(key, **fields)

    def _fail(self, exc: DadaBucksError, subject: str, **payload: object) -> OperationResult:
        if exc.code is ErrorCode.NOT_FOUND:
            subject = next((name for field, name in _NOT_FOUND_SUBJECTS if field in exc.context), subject)
        key = f"error.{exc.code.value}.{subject}"
        if not self._translator.has(key):
            key = f"error.{exc.code.value}"
        message = self._t(key, detail=str(exc), **exc.context)
        self._logger.log("operation_failed", error=exc.code.value, subject=subject, detail=str(exc))
        return OperationResult.failed(exc, message, **payload)


__all__ = ["DadaBank"]
