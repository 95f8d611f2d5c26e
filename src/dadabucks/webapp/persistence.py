"""SQLite persistence for engine snapshots."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotRecord(SQLModel, table=True):
    k: str = Field(primary_key=True)
    v: str
    updated_at: datetime = Field(default_factory=_utcnow)


def make_engine(sqlite_file: str | Path) -> Engine:
    engine = create_engine(
        f"sqlite:///{sqlite_file}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    return engine


class SqlSnapshotStore:
    """Keep one JSON blob per key in the ``snapshotrecord`` table."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def load(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            record = session.get(SnapshotRecord, key)
            return record.v if record is not None else None

    def save(self, key: str, payload: str) -> None:
        with Session(self.engine) as session:
            record = session.get(SnapshotRecord, key)
            if record is None:
                record = SnapshotRecord(k=key, v=payload)
            else:
                record.v = payload
                record.updated_at = _utcnow()
            session.add(record)
            session.commit()


__all__ = ["SnapshotRecord", "SqlSnapshotStore", "make_engine"]
