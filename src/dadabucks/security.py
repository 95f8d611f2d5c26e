"""Parent mode gate.

The challenge is a speed bump that keeps small children out of parent mode.
It is not an authentication boundary.
"""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Deque, Optional, Tuple


class ParentLock:
    """Simple arithmetic challenge guarding the switch into parent mode."""

    def __init__(self, challenge: Tuple[int, int] = (7, 5), *, locked: bool = False, history: int = 20) -> None:
        self._challenge = challenge
        self._locked = locked
        self._failures: Deque[datetime] = deque(maxlen=history)

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def question(self) -> str:
        left, right = self._challenge
        return f"{left} + {right} = ?"

    @property
    def failed_attempts(self) -> int:
        return len(self._failures)

    def lock(self) -> None:
        self._locked = True

    def check(self, answer: int | str) -> bool:
        try:
            value = int(str(answer).strip())
        except ValueError:
            return False
        return value == sum(self._challenge)

    def unlock(self, answer: int | str, *, at: Optional[datetime] = None) -> bool:
        """Unlock when ``answer`` solves the challenge; record misses otherwise."""

        if self.check(answer):
            self._locked = False
            self._failures.clear()
            return True
        self._failures.append(at or datetime.now())
        return False


__all__ = ["ParentLock"]
