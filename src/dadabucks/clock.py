"""Clock sources and the nightly cutover policy."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return naive local time."""


class SystemClock:
    """Read the wall clock."""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock:
    """Clock pinned to a chosen moment; used for manual time mode and tests."""

    def __init__(self, moment: datetime) -> None:
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = moment

    def advance(self, **delta: float) -> datetime:
        self._moment += timedelta(**delta)
        return self._moment


def day_key(moment: datetime | date) -> str:
    """Return the ``YYYY-MM-DD`` key used to group strikes and resets."""

    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.isoformat()


@dataclass(frozen=True, slots=True)
class ResetPolicy:
    """Decide when the daily cutover (default 22:00) has elapsed."""

    reset_hour: int = 22

    def __post_init__(self) -> None:
        if not 0 <= self.reset_hour <= 23:
            raise ValueError("reset_hour must be between 0 and 23")

    def cutover_on(self, day: date) -> datetime:
        return datetime.combine(day, time(hour=self.reset_hour))

    def should_reset(self, last_reset_date: str, now: datetime) -> bool:
        """Return ``True`` when a reset is owed.

        A reset is owed once today's cutover has passed and the last reset
        happened before it, or when the last reset predates yesterday's cutover
        (the app was closed for a while). Missed days collapse into one reset.
        """

        last_reset = self.cutover_on(date.fromisoformat(last_reset_date))
        today_reset = self.cutover_on(now.date())
        if now >= today_reset and last_reset < today_reset:
            return True
        yesterday_reset = today_reset - timedelta(days=1)
        return last_reset < yesterday_reset

    def period_key(self, now: datetime) -> str:
        """Return the day key of the earning day in progress at ``now``.

        Once the cutover has passed, the evening already belongs to tomorrow.
        """

        if now >= self.cutover_on(now.date()):
            return day_key(now.date() + timedelta(days=1))
        return day_key(now)

    def next_reset_time(self, now: datetime) -> datetime:
        upcoming = self.cutover_on(now.date())
        if now >= upcoming:
            upcoming += timedelta(days=1)
        return upcoming


__all__ = ["Clock", "ManualClock", "ResetPolicy", "SystemClock", "day_key"]
