from __future__ import annotations

from datetime import datetime


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Elapsed whole minutes from ``start`` to ``end`` (floored)."""
    return int((end - start).total_seconds() // 60)


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
