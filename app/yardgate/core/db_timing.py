"""Per-request accumulation of time spent inside SQL statements."""
from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_db_time_ms: ContextVar[float | None] = ContextVar("db_time_ms", default=None)


@contextmanager
def db_timer() -> Iterator[None]:
    token = _db_time_ms.set(0.0)
    try:
        yield
    finally:
        _db_time_ms.reset(token)


def timing_active() -> bool:
    return _db_time_ms.get() is not None


def add_db_time_since(started_at: float) -> None:
    current = _db_time_ms.get()
    if current is None:
        return
    _db_time_ms.set(current + (time.perf_counter() - started_at) * 1000)


def get_db_time_ms() -> float | None:
    return _db_time_ms.get()
