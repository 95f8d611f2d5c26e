"""Domain models used by the Dada Bucks engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .exceptions import (
    DadaBucksError,
    DailyCapReachedError,
    ErrorCode,
    InactiveTaskError,
    InsufficientBalanceError,
    InsufficientSavingsError,
    InvalidAmountError,
    NothingToUndoError,
)
from .money import require_positive


class UserRole(str, Enum):
    """Which side of the app is in use."""

    PARENT = "parent"
    CHILD = "child"


class TransactionType(str, Enum):
    """Enumerates the balance-affecting events recorded in the ledger."""

    EARN = "earn"
    SPEND = "spend"
    REFUND = "refund"
    STRIKE_PENALTY = "strike_penalty"
    INTEREST = "interest"
    SAVINGS_DEPOSIT = "savings_deposit"
    SAVINGS_WITHDRAWAL = "savings_withdrawal"


class TaskCategory(str, Enum):
    CHORES = "chores"
    HYGIENE = "hygiene"
    LEARNING = "learning"
    HELPING = "helping"
    OTHER = "other"


class SpendCategory(str, Enum):
    SCREEN_TIME = "screenTime"
    TREATS = "treats"
    ACTIVITIES = "activities"
    GAMES = "games"


class RequestStatus(str, Enum):
    """Lifecycle for spend requests awaiting a parent decision."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


def require_name(value: str, label: str = "name") -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise InvalidAmountError(f"A {label} is required.")
    return cleaned


@dataclass(slots=True)
class ChildProfile:
    """Per-child record of spendable, saved and provisional bucks."""

    id: str
    name: str
    avatar: str
    balance: int = 0
    savings: int = 0
    savings_interest_accrued: int = 0
    pending_earnings: int = 0
    total_earned: int = 0
    total_spent: int = 0
    last_interest_date: str = ""

    def __post_init__(self) -> None:
        for label in ("balance", "savings", "pending_earnings", "total_earned", "total_spent"):
            if getattr(self, label) < 0:
                raise ValueError(f"{label} cannot be negative.")
        if not 0 <= self.savings_interest_accrued <= 99:
            raise ValueError("savings_interest_accrued must be between 0 and 99.")

    @property
    def holdings(self) -> int:
        """Return every buck the child holds, released or not."""

        return self.balance + self.savings + self.pending_earnings

    def add_pending(self, amount: int) -> None:
        self.pending_earnings += require_positive(amount)

    def remove_pending(self, amount: int) -> int:
        """Take up to ``amount`` back out of pending earnings, floored at zero."""

        removed = min(require_positive(amount), self.pending_earnings)
        self.pending_earnings -= removed
        return removed

    def forfeit_pending(self) -> int:
        forfeited = self.pending_earnings
        self.pending_earnings = 0
        return forfeited

    def release_pending(self) -> int:
        """Move pending earnings into the spendable balance."""

        released = self.pending_earnings
        self.balance += released
        self.total_earned += released
        self.pending_earnings = 0
        return released

    def move_to_savings(self, amount: int) -> None:
        require_positive(amount)
        if amount > self.balance:
            raise InsufficientBalanceError(
                f"{self.name} only has {self.balance} to move.", balance=self.balance, amount=amount
            )
        self.balance -= amount
        self.savings += amount

    def move_from_savings(self, amount: int) -> None:
        require_positive(amount)
        if amount > self.savings:
            raise InsufficientSavingsError(
                f"{self.name} only has {self.savings} saved.", savings=self.savings, amount=amount
            )
        self.savings -= amount
        self.balance += amount

    def spend(self, amount: int) -> None:
        require_positive(amount)
        if amount > self.balance:
            raise InsufficientBalanceError(
                f"{self.name} only has {self.balance} to spend.", balance=self.balance, amount=amount
            )
        self.balance -= amount
        self.total_spent += amount


@dataclass(slots=True)
class Task:
    """An earnable action with a per-day completion cap."""

    id: str
    name: str
    icon: str
    payout: int
    daily_max: int
    completions: int = 0
    is_active: bool = True
    category: TaskCategory = TaskCategory.OTHER

    def __post_init__(self) -> None:
        require_positive(self.payout)
        require_positive(self.daily_max)
        if not 0 <= self.completions <= self.daily_max:
            raise ValueError("completions must be between 0 and daily_max.")
        self.category = TaskCategory(self.category)

    @property
    def remaining_today(self) -> int:
        return self.daily_max - self.completions

    def ensure_active(self) -> None:
        if not self.is_active:
            raise InactiveTaskError(f"Task '{self.name}' is not active.", task_id=self.id)

    def ensure_capacity(self) -> None:
        if self.completions >= self.daily_max:
            raise DailyCapReachedError(
                f"Daily limit reached for '{self.name}'.", task_id=self.id, daily_max=self.daily_max
            )

    def record_completion(self) -> int:
        self.ensure_active()
        self.ensure_capacity()
        self.completions += 1
        return self.completions

    def undo_completion(self) -> int:
        if self.completions <= 0:
            raise NothingToUndoError(f"No completions of '{self.name}' to undo.", task_id=self.id)
        self.completions -= 1
        return self.completions


@dataclass(slots=True)
class SpendItem:
    """Catalog entry a child can ask to spend bucks on."""

    id: str
    name: str
    icon: str
    unit_cost: int
    quantity: int = 1
    max_quantity: int = 1
    category: SpendCategory = SpendCategory.TREATS
    description: str = ""

    def __post_init__(self) -> None:
        require_positive(self.unit_cost)
        require_positive(self.quantity)
        require_positive(self.max_quantity)
        if self.quantity > self.max_quantity:
            raise InvalidAmountError("Default quantity cannot exceed max_quantity.")
        self.category = SpendCategory(self.category)


@dataclass(frozen=True, slots=True)
class RequestItem:
    """Snapshot of a catalog item at the moment a request is made."""

    item_ref: str
    name: str
    icon: str
    unit_cost: int
    quantity: int

    def __post_init__(self) -> None:
        require_positive(self.unit_cost)
        require_positive(self.quantity)

    @property
    def subtotal(self) -> int:
        return self.unit_cost * self.quantity


@dataclass(slots=True)
class SpendRequest:
    """A child's ask to spend bucks, resolved once by a parent."""

    id: str
    child_id: str
    items: Tuple[RequestItem, ...]
    total_cost: int
    status: RequestStatus = RequestStatus.PENDING
    requested_at: datetime = field(default_factory=datetime.now)
    responded_at: Optional[datetime] = None

    @classmethod
    def create(
        cls, request_id: str, child_id: str, items: Sequence[RequestItem], *, when: datetime
    ) -> "SpendRequest":
        snapshot = tuple(items)
        if not snapshot:
            raise InvalidAmountError("A request needs at least one item.")
        total = sum(item.subtotal for item in snapshot)
        return cls(id=request_id, child_id=child_id, items=snapshot, total_cost=total, requested_at=when)

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    def approve(self, *, when: datetime) -> None:
        self._resolve(RequestStatus.APPROVED, when)

    def deny(self, *, when: datetime) -> None:
        self._resolve(RequestStatus.DENIED, when)

    def _resolve(self, status: RequestStatus, when: datetime) -> None:
        if not self.is_pending:
            raise ValueError(f"Request '{self.id}' is already {self.status.value}.")
        self.status = status
        self.responded_at = when


@dataclass(slots=True)
class ApprovedRequestNotification:
    """Confirmation shown to the child once a request has been approved."""

    request_id: str
    child_id: str
    items: Tuple[RequestItem, ...]
    total_cost: int
    approved_at: datetime
    shown_to_child: bool = False


@dataclass(slots=True)
class Strike:
    """A single demerit recorded against a child for one calendar day."""

    id: str
    child_id: str
    reason: str
    timestamp: datetime
    day: str


@dataclass(frozen=True, slots=True)
class Transaction:
    """Immutable ledger entry; ``amount`` is signed from the balance's view."""

    id: str
    child_id: str
    type: TransactionType
    amount: int
    description: str
    timestamp: datetime
    metadata: Dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Typed patches applied by parent actions
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ChildUpdate:
    name: Optional[str] = None
    avatar: Optional[str] = None

    def apply(self, child: ChildProfile) -> ChildProfile:
        name = require_name(self.name) if self.name is not None else child.name
        avatar = self.avatar if self.avatar else child.avatar
        child.name = name
        child.avatar = avatar
        return child


@dataclass(frozen=True, slots=True)
class TaskDraft:
    name: str
    icon: str
    payout: int
    daily_max: int
    category: TaskCategory = TaskCategory.OTHER
    is_active: bool = True

    def build(self, task_id: str) -> Task:
        return Task(
            id=task_id,
            name=require_name(self.name),
            icon=self.icon,
            payout=self.payout,
            daily_max=self.daily_max,
            is_active=self.is_active,
            category=TaskCategory(self.category),
        )


@dataclass(frozen=True, slots=True)
class TaskUpdate:
    name: Optional[str] = None
    icon: Optional[str] = None
    payout: Optional[int] = None
    daily_max: Optional[int] = None
    category: Optional[TaskCategory] = None
    is_active: Optional[bool] = None

    def apply(self, task: Task) -> Task:
        """Validate every field first, then merge into ``task``."""

        name = require_name(self.name) if self.name is not None else task.name
        payout = require_positive(self.payout) if self.payout is not None else task.payout
        daily_max = require_positive(self.daily_max) if self.daily_max is not None else task.daily_max
        category = TaskCategory(self.category) if self.category is not None else task.category
        task.name = name
        task.icon = self.icon if self.icon is not None else task.icon
        task.payout = payout
        task.daily_max = daily_max
        task.completions = min(task.completions, daily_max)
        task.category = category
        if self.is_active is not None:
            task.is_active = self.is_active
        return task


@dataclass(frozen=True, slots=True)
class SpendItemDraft:
    name: str
    icon: str
    unit_cost: int
    quantity: int = 1
    max_quantity: int = 1
    category: SpendCategory = SpendCategory.TREATS
    description: str = ""

    def build(self, item_id: str) -> SpendItem:
        return SpendItem(
            id=item_id,
            name=require_name(self.name),
            icon=self.icon,
            unit_cost=self.unit_cost,
            quantity=self.quantity,
            max_quantity=self.max_quantity,
            category=SpendCategory(self.category),
            description=self.description,
        )


@dataclass(frozen=True, slots=True)
class SpendItemUpdate:
    name: Optional[str] = None
    icon: Optional[str] = None
    unit_cost: Optional[int] = None
    quantity: Optional[int] = None
    max_quantity: Optional[int] = None
    category: Optional[SpendCategory] = None
    description: Optional[str] = None

    def apply(self, item: SpendItem) -> SpendItem:
        name = require_name(self.name) if self.name is not None else item.name
        unit_cost = require_positive(self.unit_cost) if self.unit_cost is not None else item.unit_cost
        quantity = require_positive(self.quantity) if self.quantity is not None else item.quantity
        max_quantity = (
            require_positive(self.max_quantity) if self.max_quantity is not None else item.max_quantity
        )
        if quantity > max_quantity:
            raise InvalidAmountError("Default quantity cannot exceed max_quantity.")
        category = SpendCategory(self.category) if self.category is not None else item.category
        item.name = name
        item.icon = self.icon if self.icon is not None else item.icon
        item.unit_cost = unit_cost
        item.quantity = quantity
        item.max_quantity = max_quantity
        item.category = category
        if self.description is not None:
            item.description = self.description
        return item


# ---------------------------------------------------------------------------
# Values handed back to the presentation layer
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of an engine operation; business failures never raise."""

    success: bool
    message: str
    error: Optional[ErrorCode] = None
    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **payload: Any) -> "OperationResult":
        return cls(success=True, message=message, payload=payload)

    @classmethod
    def failed(
        cls, error: DadaBucksError, message: str | None = None, **payload: Any
    ) -> "OperationResult":
        return cls(success=False, message=message or str(error), error=error.code, payload=payload)

    def __bool__(self) -> bool:
        return self.success

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    @property
    def earned(self) -> Optional[int]:
        return self.payload.get("earned")

    @property
    def forfeited(self) -> Optional[int]:
        return self.payload.get("forfeited")

    @property
    def request_id(self) -> Optional[str]:
        return self.payload.get("request_id")

    @property
    def child_id(self) -> Optional[str]:
        return self.payload.get("child_id")

    @property
    def task_id(self) -> Optional[str]:
        return self.payload.get("task_id")

    @property
    def item_id(self) -> Optional[str]:
        return self.payload.get("item_id")

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.error is not None:
            data["error"] = self.error.value
        data.update(self.payload)
        return data


@dataclass(frozen=True, slots=True)
class ResetOutcome:
    """Aggregate totals from a daily reset, for notification only."""

    did_reset: bool
    earnings_deposited: int = 0
    interest_earned: int = 0


@dataclass(frozen=True, slots=True)
class DailyStats:
    earned: int
    spent: int
    strikes: int


__all__ = [
    "ApprovedRequestNotification",
    "ChildProfile",
    "ChildUpdate",
    "DailyStats",
    "OperationResult",
    "RequestItem",
    "RequestStatus",
    "ResetOutcome",
    "SpendCategory",
    "SpendItem",
    "SpendItemDraft",
    "SpendItemUpdate",
    "SpendRequest",
    "Strike",
    "Task",
    "TaskCategory",
    "TaskDraft",
    "TaskUpdate",
    "Transaction",
    "TransactionType",
    "UserRole",
]
