from __future__ import annotations

import threading
from collections import deque
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_SYNC_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from ..devices.model import Device
from .model import DailySyncSummary, SyncResult


class SyncHistory:
    """Bounded log of sync results; the oldest entries are evicted first."""

    def __init__(self, *, limit: int = DEFAULT_SYNC_HISTORY_LIMIT, clock: Callable[[], datetime] = now_utc):
        if int(limit) < 1:
            raise ValidationError("Sync history limit must be at least 1")
        self._results: deque[SyncResult] = deque(maxlen=int(limit))
        self._lock = threading.Lock()
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._results.maxlen or 0

    def record(self, result: SyncResult) -> None:
        with self._lock:
            self._results.append(result)

    def recent(self, limit: Optional[int] = None) -> list[SyncResult]:
        """Most recent results, oldest first."""
        with self._lock:
            items = list(self._results)
        if limit is not None:
            items = items[-int(limit):] if int(limit) > 0 else []
        return items

    def clear(self) -> None:
        with self._lock:
            self._results.clear()

    def daily_summary(self, device_id: str, start: date, end: date) -> list[DailySyncSummary]:
        if start > end:
            raise ValidationError("Start date must not be after end date")

        totals: dict[date, list[int]] = {}
        for r in self.recent():
            if r.device_id != device_id or r.synced_at is None:
                continue
            day = r.synced_at.date()
            if not start <= day <= end:
                continue
            t = totals.setdefault(day, [0, 0, 0])
            t[0] += r.records_processed
            t[1] += r.records_added + r.records_updated
            t[2] += len(r.errors)

        return [
            DailySyncSummary(date=day, total_records=t[0], successful_records=t[1], failed_records=t[2])
            for day, t in sorted(totals.items())
        ]

    def device_summary(self, device_id: str, day: date) -> DailySyncSummary:
        rows = self.daily_summary(device_id, day, day)
        if rows:
            return rows[0]
        return DailySyncSummary(date=day, total_records=0, successful_records=0, failed_records=0)

    def build_export(self, device: Device, start: date, end: date) -> dict:
        records = self.daily_summary(device.device_id, start, end)
        return {
            "device_name": device.name,
            "export_date": self._clock().isoformat(),
            "date_range": {"start_date": start.strftime("%Y-%m-%d"), "end_date": end.strftime("%Y-%m-%d")},
            "records": [r.to_dict() for r in records],
        }
