"""Operational utilities for Dada Bucks."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional


class StructuredLogger:
    """Write JSON lines log entries for parent inspection."""

    def __init__(
        self,
        *,
        path: Path | None = None,
        time_source: Optional[Callable[[], datetime]] = None,
        max_entries: int = 500,
    ) -> None:
        self.path = path
        self._time_source = time_source or datetime.now
        self._max_entries = max_entries
        self._entries: list[dict] = []

    def log(self, event_type: str, **fields: object) -> dict:
        entry = {"timestamp": self._time_source().isoformat(), "event": event_type, **fields}
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            del self._entries[: len(self._entries) - self._max_entries]
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(entry, default=str) + "\n")
        return entry

    def tail(self, limit: int = 50) -> tuple[dict, ...]:
        return tuple(self._entries[-limit:])

    def events(self, event_type: str) -> tuple[dict, ...]:
        return tuple(entry for entry in self._entries if entry["event"] == event_type)


__all__ = ["StructuredLogger"]
