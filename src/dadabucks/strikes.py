"""Per-day strike records that gate earning and trigger forfeiture."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, List, Sequence

from .exceptions import NotFoundError, StrikeCapReachedError
from .models import Strike


class StrikeLedger:
    """Append-only strikes, capped at ``max_strikes`` per child per day."""

    def __init__(
        self,
        strikes: Iterable[Strike] = (),
        *,
        max_strikes: int = 3,
        id_factory: Callable[[str], str],
    ) -> None:
        if max_strikes <= 0:
            raise ValueError("max_strikes must be positive")
        self.max_strikes = max_strikes
        self._strikes: List[Strike] = list(strikes)
        self._id_factory = id_factory

    def __len__(self) -> int:
        return len(self._strikes)

    def strikes(self, *, child_id: str | None = None, day: str | None = None) -> Sequence[Strike]:
        records = self._strikes
        if child_id is not None:
            records = [strike for strike in records if strike.child_id == child_id]
        if day is not None:
            records = [strike for strike in records if strike.day == day]
        return tuple(records)

    def count(self, child_id: str, day: str) -> int:
        return len(self.strikes(child_id=child_id, day=day))

    def is_exhausted(self, child_id: str, day: str) -> bool:
        return self.count(child_id, day) >= self.max_strikes

    def add(self, child_id: str, reason: str, *, at: datetime, day: str) -> Strike:
        """Append a strike; the caller handles forfeiture when the cap is hit."""

        if self.is_exhausted(child_id, day):
            raise StrikeCapReachedError(
                "Maximum strikes already reached today.", child_id=child_id, max_strikes=self.max_strikes
            )
        strike = Strike(
            id=self._id_factory("strike"),
            child_id=child_id,
            reason=reason.strip(),
            timestamp=at,
            day=day,
        )
        self._strikes.append(strike)
        return strike

    def remove(self, strike_id: str) -> Strike:
        for index, strike in enumerate(self._strikes):
            if strike.id == strike_id:
                return self._strikes.pop(index)
        raise NotFoundError(f"Strike '{strike_id}' not found.", strike_id=strike_id)

    def clear(self) -> int:
        removed = len(self._strikes)
        self._strikes.clear()
        return removed

    def discard_child(self, child_id: str) -> None:
        self._strikes = [strike for strike in self._strikes if strike.child_id != child_id]

    def retain_day(self, day: str) -> int:
        """Drop strikes from any other day and return how many were removed."""

        before = len(self._strikes)
        self._strikes = [strike for strike in self._strikes if strike.day == day]
        return before - len(self._strikes)


__all__ = ["StrikeLedger"]
