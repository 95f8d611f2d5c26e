"""Load/save boundary for engine snapshots."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional, Protocol


class SnapshotStore(Protocol):
    """Anything that can keep one serialized blob per key."""

    def load(self, key: str) -> Optional[str]:
        """Return the stored blob, or ``None`` when nothing was saved yet."""

    def save(self, key: str, payload: str) -> None:
        """Replace the blob stored under ``key``."""


class MemorySnapshotStore:
    """Keep snapshots in a dictionary; handy for tests and previews."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._blobs: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def save(self, key: str, payload: str) -> None:
        self._blobs[key] = payload


_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]+")


class JsonFileSnapshotStore:
    """Write each snapshot to ``<directory>/<key>.json``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)
        scratch = target.with_suffix(".json.tmp")
        scratch.write_text(payload, encoding="utf-8")
        scratch.replace(target)


__all__ = ["JsonFileSnapshotStore", "MemorySnapshotStore", "SnapshotStore"]
