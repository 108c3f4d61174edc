from __future__ import annotations

from datetime import date, datetime, time, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def split_timestamp(value: datetime) -> tuple[date, time]:
    """Split an event timestamp into the ledger's (date, check-in time) pair.

    Aware timestamps are normalized to UTC first; sub-second precision is dropped.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date(), value.time().replace(microsecond=0, tzinfo=None)
