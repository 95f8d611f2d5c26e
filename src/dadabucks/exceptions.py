"""Custom exception hierarchy for the Dada Bucks engine."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Machine readable codes for expected business rule failures."""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    DAILY_CAP_REACHED = "daily_cap_reached"
    STRIKE_CAP_REACHED = "strike_cap_reached"
    STRIKES_EXHAUSTED = "strikes_exhausted"
    VAULT_INSUFFICIENT = "vault_insufficient"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INSUFFICIENT_SAVINGS = "insufficient_savings"
    INVALID_AMOUNT = "invalid_amount"
    REQUEST_ALREADY_PENDING = "request_already_pending"
    LAST_CHILD_PROTECTED = "last_child_protected"
    NOTHING_TO_UNDO = "nothing_to_undo"


class DadaBucksError(Exception):
    """Base class for all expected Dada Bucks business errors."""

    code: ErrorCode = ErrorCode.NOT_FOUND

    def __init__(self, message: str = "", **context: object) -> None:
        super().__init__(message)
        self.context = dict(context)


class NotFoundError(DadaBucksError):
    """Raised when a child, task, item, strike or request lookup fails."""

    code = ErrorCode.NOT_FOUND


class InactiveTaskError(DadaBucksError):
    """Raised when completing a task that a parent has switched off."""

    code = ErrorCode.INACTIVE


class DailyCapReachedError(DadaBucksError):
    """Raised when a task has been completed ``daily_max`` times today."""

    code = ErrorCode.DAILY_CAP_REACHED


class StrikeCapReachedError(DadaBucksError):
    """Raised when adding a strike to a child already at the daily cap."""

    code = ErrorCode.STRIKE_CAP_REACHED


class StrikesExhaustedError(DadaBucksError):
    """Raised when a child with a full set of strikes tries to earn."""

    code = ErrorCode.STRIKES_EXHAUSTED


class VaultInsufficientError(DadaBucksError):
    """Raised when the vault cannot cover a payout."""

    code = ErrorCode.VAULT_INSUFFICIENT


class InsufficientBalanceError(DadaBucksError):
    """Raised when an operation would take the spendable balance below zero."""

    code = ErrorCode.INSUFFICIENT_BALANCE


class InsufficientSavingsError(DadaBucksError):
    """Raised when a withdrawal exceeds the savings balance."""

    code = ErrorCode.INSUFFICIENT_SAVINGS


class InvalidAmountError(DadaBucksError):
    """Raised for zero, negative or otherwise malformed amounts."""

    code = ErrorCode.INVALID_AMOUNT


class RequestAlreadyPendingError(DadaBucksError):
    """Raised when a child already has a spend request awaiting a parent."""

    code = ErrorCode.REQUEST_ALREADY_PENDING


class LastChildProtectedError(DadaBucksError):
    """Raised when deleting the only remaining child profile."""

    code = ErrorCode.LAST_CHILD_PROTECTED


class NothingToUndoError(DadaBucksError):
    """Raised when undoing a task that has no completions today."""

    code = ErrorCode.NOTHING_TO_UNDO


class CorruptStateError(Exception):
    """Raised when a persisted snapshot cannot be decoded.

    Not part of the :class:`DadaBucksError` family; it propagates out of
    engine operations instead of becoming a failed result.
    """
