"""Dada Bucks web application package.

``uvicorn dadabucks.webapp:app`` serves an application built from the
environment on first access.
"""
from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Any, List

from . import persistence as _persistence
from .config import WebSettings, load_web_settings

persistence = _persistence
__all__: List[str] = ["WebSettings", "app", "create_app", "load_web_settings"]
__all__.extend(getattr(_persistence, "__all__", ()))

_IMPL_MODULE: ModuleType | None = None
_APP: Any = None


def _load_impl() -> ModuleType:
    global _IMPL_MODULE
    if _IMPL_MODULE is None:
        _IMPL_MODULE = import_module(".application", __name__)
    return _IMPL_MODULE


def __getattr__(name: str) -> Any:
    global _APP
    if hasattr(_persistence, name):
        return getattr(_persistence, name)
    module = _load_impl()
    if name == "app":
        if _APP is None:
            _APP = module.create_app()
        return _APP
    return getattr(module, name)


def __dir__() -> List[str]:
    return sorted(set(globals()) | set(__all__))
