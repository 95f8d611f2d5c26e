"""Dada Bucks: a household virtual-currency ledger for children."""

from .clock import Clock, ManualClock, ResetPolicy, SystemClock, day_key
from .config import BankConfig, load_config
from .exceptions import (
    CorruptStateError,
    DadaBucksError,
    DailyCapReachedError,
    ErrorCode,
    InactiveTaskError,
    InsufficientBalanceError,
    InsufficientSavingsError,
    InvalidAmountError,
    LastChildProtectedError,
    NotFoundError,
    NothingToUndoError,
    RequestAlreadyPendingError,
    StrikeCapReachedError,
    StrikesExhaustedError,
    VaultInsufficientError,
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
    RequestStatus,
    ResetOutcome,
    SpendCategory,
    SpendItem,
    SpendItemDraft,
    SpendItemUpdate,
    SpendRequest,
    Strike,
    Task,
    TaskCategory,
    TaskDraft,
    TaskUpdate,
    Transaction,
    TransactionType,
    UserRole,
)
from .ops import StructuredLogger
from .security import ParentLock
from .service import DadaBank
from .storage import JsonFileSnapshotStore, MemorySnapshotStore, SnapshotStore
from .vault import Vault

__all__ = [
    "ApprovedRequestNotification",
    "BankConfig",
    "ChildProfile",
    "ChildUpdate",
    "Clock",
    "CorruptStateError",
    "DadaBank",
    "DadaBucksError",
    "DailyCapReachedError",
    "DailyStats",
    "ErrorCode",
    "InactiveTaskError",
    "InsufficientBalanceError",
    "InsufficientSavingsError",
    "InterestCalculator",
    "InterestResult",
    "InvalidAmountError",
    "JsonFileSnapshotStore",
    "LastChildProtectedError",
    "ManualClock",
    "MemorySnapshotStore",
    "NotFoundError",
    "NothingToUndoError",
    "OperationResult",
    "ParentLock",
    "RequestAlreadyPendingError",
    "RequestItem",
    "RequestStatus",
    "ResetOutcome",
    "ResetPolicy",
    "SnapshotStore",
    "SpendCategory",
    "SpendItem",
    "SpendItemDraft",
    "SpendItemUpdate",
    "SpendRequest",
    "Strike",
    "StrikeCapReachedError",
    "StrikesExhaustedError",
    "StructuredLogger",
    "SystemClock",
    "Task",
    "TaskCategory",
    "TaskDraft",
    "TaskUpdate",
    "Transaction",
    "TransactionType",
    "Translator",
    "UserRole",
    "Vault",
    "VaultInsufficientError",
    "day_key",
    "load_config",
]
