"""Configuration for the Dada Bucks web frontend."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from ..config import STORAGE_KEY

DEFAULT_SESSION_SECRET = "change-this-session-secret"
DEFAULT_SQLITE_FILE = "dadabucks.db"
RESET_POLL_SECONDS = 60
SESSION_ROLE_KEY = "role"
SESSION_CHILD_KEY = "child_id"


@dataclass(frozen=True)
class WebSettings:
    session_secret: str = DEFAULT_SESSION_SECRET
    sqlite_file: str = DEFAULT_SQLITE_FILE
    storage_key: str = STORAGE_KEY
    reset_poll_seconds: float = RESET_POLL_SECONDS


def load_web_settings(environ: Optional[Mapping[str, str]] = None) -> WebSettings:
    """Read ``DADABUCKS_*`` web settings, loading ``.env`` first when using the real environment."""

    if environ is None:
        load_dotenv()
        environ = os.environ
    return WebSettings(
        session_secret=environ.get("DADABUCKS_SESSION_SECRET") or DEFAULT_SESSION_SECRET,
        sqlite_file=environ.get("DADABUCKS_SQLITE") or DEFAULT_SQLITE_FILE,
        storage_key=environ.get("DADABUCKS_STORAGE_KEY") or STORAGE_KEY,
        reset_poll_seconds=float(environ.get("DADABUCKS_RESET_POLL_SECONDS") or RESET_POLL_SECONDS),
    )


__all__ = [
    "DEFAULT_SESSION_SECRET",
    "DEFAULT_SQLITE_FILE",
    "RESET_POLL_SECONDS",
    "SESSION_CHILD_KEY",
    "SESSION_ROLE_KEY",
    "WebSettings",
    "load_web_settings",
]
