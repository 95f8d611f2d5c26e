"""Append-only transaction log for every balance-affecting event."""

from __future__ import annotations

import csv
from datetime import date, datetime
from io import StringIO
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import DailyStats, Transaction, TransactionType


class TransactionLog:
    """Ledger kept newest first, as the child and parent screens read it."""

    __slots__ = ("_entries", "_id_factory")

    def __init__(
        self,
        entries: Iterable[Transaction] = (),
        *,
        id_factory: Callable[[str], str],
    ) -> None:
        self._entries: List[Transaction] = list(entries)
        self._id_factory = id_factory

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    @property
    def entries(self) -> Tuple[Transaction, ...]:
        """Return an immutable, newest-first view of the ledger."""

        return tuple(self._entries)

    def record(
        self,
        child_id: str,
        transaction_type: TransactionType,
        amount: int,
        description: str,
        *,
        at: datetime,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> Transaction:
        transaction = Transaction(
            id=self._id_factory("txn"),
            child_id=child_id,
            type=transaction_type,
            amount=amount,
            description=description,
            timestamp=at,
            metadata=dict(metadata or {}),
        )
        self._entries.insert(0, transaction)
        return transaction

    def filter(
        self,
        *,
        child_id: str | None = None,
        day: date | None = None,
        types: Optional[Sequence[TransactionType]] = None,
    ) -> Tuple[Transaction, ...]:
        """Return transactions filtered by the provided criteria."""

        result: list[Transaction] = []
        for transaction in self._entries:
            if child_id is not None and transaction.child_id != child_id:
                continue
            if day is not None and transaction.timestamp.date() != day:
                continue
            if types and transaction.type not in types:
                continue
            result.append(transaction)
        return tuple(result)

    def daily_stats(self, child_id: str, day: date, *, strikes: int) -> DailyStats:
        todays = self.filter(child_id=child_id, day=day)
        earned = sum(
            entry.amount
            for entry in todays
            if entry.type in (TransactionType.EARN, TransactionType.INTEREST)
        )
        spent = sum(abs(entry.amount) for entry in todays if entry.type is TransactionType.SPEND)
        return DailyStats(earned=earned, spent=spent, strikes=strikes)

    def export_csv(self, *, child_id: str | None = None) -> str:
        """Return a CSV export of the ledger, newest first."""

        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["timestamp", "child_id", "type", "description", "amount"])
        for transaction in self.filter(child_id=child_id):
            writer.writerow(
                [
                    transaction.timestamp.isoformat(),
                    transaction.child_id,
                    transaction.type.value,
                    transaction.description,
                    transaction.amount,
                ]
            )
        return buffer.getvalue()


__all__ = ["TransactionLog"]
